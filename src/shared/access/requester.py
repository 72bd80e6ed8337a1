"""The authenticated principal behind a request.

Roles arrive in more than one shape (a plain string such as ``"Admin"``, or a
nested object such as ``{"name": "admin"}``). They are normalized once, here,
so nothing downstream has to care.
"""

from dataclasses import dataclass
from enum import Enum


class Role(Enum):
    CUSTOMER = "customer"
    SUPPORT = "support"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


def normalize_role(raw) -> Role | None:
    """Coerce a raw role claim to a ``Role``.

    Accepts a ``Role``, a string, a mapping carrying ``name`` (or ``role``),
    or any object with a ``name`` attribute. Matching is case-insensitive.
    Returns ``None`` for anything unrecognized.
    """
    if raw is None:
        return None
    if isinstance(raw, Role):
        return raw
    if isinstance(raw, dict):
        raw = raw.get("name", raw.get("role"))
    elif not isinstance(raw, str):
        raw = getattr(raw, "name", None)
    if not isinstance(raw, str):
        return None

    try:
        return Role(raw.strip().lower())
    except ValueError:
        return None


@dataclass(frozen=True)
class Requester:
    """Who is asking: a user id and a normalized role (``None`` if unknown)."""

    user_id: str
    role: Role | None = None

    @classmethod
    def from_claims(cls, user_id, role) -> "Requester":
        return cls(user_id=str(user_id), role=normalize_role(role))

    @property
    def is_staff(self) -> bool:
        return self.role in (Role.ADMIN, Role.SUPERADMIN)
