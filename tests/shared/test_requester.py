"""Tests for role normalization and the Requester value."""

import pytest
from shared.access import Requester, Role, normalize_role


class TestNormalizeRole:
    @pytest.mark.parametrize("raw", ["admin", "Admin", "ADMIN", "  admin  "])
    def test_plain_strings_are_case_insensitive(self, raw):
        assert normalize_role(raw) == Role.ADMIN

    def test_nested_mapping_with_name(self):
        assert normalize_role({"name": "Superadmin"}) == Role.SUPERADMIN

    def test_nested_mapping_with_role_key(self):
        assert normalize_role({"role": "support"}) == Role.SUPPORT

    def test_object_with_name_attribute(self):
        class RoleClaim:
            name = "Customer"

        assert normalize_role(RoleClaim()) == Role.CUSTOMER

    def test_role_member_passes_through(self):
        assert normalize_role(Role.SUPPORT) is Role.SUPPORT

    @pytest.mark.parametrize("raw", [None, "", "root", {"name": None}, {}, 42])
    def test_unrecognized_values_yield_none(self, raw):
        assert normalize_role(raw) is None


class TestRequester:
    def test_from_claims_normalizes_role(self):
        requester = Requester.from_claims("user-1", {"name": "ADMIN"})
        assert requester.user_id == "user-1"
        assert requester.role == Role.ADMIN

    def test_from_claims_stringifies_user_id(self):
        assert Requester.from_claims(123, "customer").user_id == "123"

    def test_unknown_role_is_kept_as_none(self):
        assert Requester.from_claims("user-1", "wizard").role is None

    def test_is_staff(self):
        assert Requester("u", Role.ADMIN).is_staff
        assert Requester("u", Role.SUPERADMIN).is_staff
        assert not Requester("u", Role.SUPPORT).is_staff
        assert not Requester("u", None).is_staff

    def test_is_immutable(self):
        requester = Requester("u", Role.CUSTOMER)
        with pytest.raises(AttributeError):
            requester.role = Role.ADMIN
