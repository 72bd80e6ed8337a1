"""Requester identity, role normalization and order visibility scoping."""

from shared.access.errors import NotAuthenticated, PermissionDenied
from shared.access.requester import Requester, Role, normalize_role
from shared.access.scope import (
    DELETE_ROLES,
    TRANSITION_ROLES,
    UNRESTRICTED_ROLES,
    AccessScope,
    require_role,
)

__all__ = [
    "DELETE_ROLES",
    "TRANSITION_ROLES",
    "UNRESTRICTED_ROLES",
    "AccessScope",
    "NotAuthenticated",
    "PermissionDenied",
    "Requester",
    "Role",
    "normalize_role",
    "require_role",
]
