"""Tests for bcrypt password hashing."""

from identity.shared.password import hash_password, verify_password


class TestPasswordHashing:
    def test_hash_is_not_the_password(self):
        hashed = hash_password("correct horse battery", rounds=4)
        assert hashed != "correct horse battery"
        assert hashed.startswith("$2")

    def test_verify_round_trip(self):
        hashed = hash_password("correct horse battery", rounds=4)
        assert verify_password("correct horse battery", hashed)
        assert not verify_password("wrong horse battery", hashed)

    def test_rounds_default_to_configured_cost(self):
        # The test overlay configures BCRYPT_ROUNDS = 4
        assert hash_password("correct horse battery").startswith("$2b$04$")

    def test_malformed_hash_does_not_verify(self):
        assert not verify_password("anything", "not-a-bcrypt-hash")

    def test_missing_values_do_not_verify(self):
        assert not verify_password("", "$2b$04$abc")
        assert not verify_password("secret", None)
