"""bcrypt password hashing."""

import bcrypt
from protean.utils.globals import current_domain

DEFAULT_ROUNDS = 12


def hash_password(raw_password: str, rounds: int | None = None) -> str:
    """Hash a password with a fresh salt. Cost comes from ``BCRYPT_ROUNDS`` when not given."""
    if rounds is None:
        rounds = int(getattr(current_domain, "BCRYPT_ROUNDS", DEFAULT_ROUNDS))
    return bcrypt.hashpw(raw_password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(raw_password: str, password_hash: str | None) -> bool:
    if not raw_password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(raw_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False
