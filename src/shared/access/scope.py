"""Role-derived visibility rules for orders and invoices.

Customers and support agents only ever see orders they own. Admins and
superadmins see everything. A missing or unrecognized role is treated like a
customer, never as privileged.
"""

from protean.utils.query import Q

from shared.access.errors import PermissionDenied
from shared.access.requester import Requester, Role

UNRESTRICTED_ROLES = frozenset({Role.ADMIN, Role.SUPERADMIN})
TRANSITION_ROLES = frozenset({Role.ADMIN, Role.SUPERADMIN})
DELETE_ROLES = frozenset({Role.SUPERADMIN})


class AccessScope:
    """Query predicate restricting reads to what a requester may see."""

    def __init__(self, requester: Requester, owner_field: str = "customer_id"):
        self.requester = requester
        self.owner_field = owner_field

    @classmethod
    def for_requester(cls, requester: Requester, owner_field: str = "customer_id") -> "AccessScope":
        return cls(requester, owner_field=owner_field)

    @property
    def is_unrestricted(self) -> bool:
        return self.requester.role in UNRESTRICTED_ROLES

    @property
    def predicate(self) -> Q:
        """The filter to AND into every order read. Empty when unrestricted."""
        if self.is_unrestricted:
            return Q()
        return Q(**{self.owner_field: self.requester.user_id})

    def apply(self, queryset):
        """Narrow a protean ``QuerySet`` to this scope."""
        if self.is_unrestricted:
            return queryset
        return queryset.filter(self.predicate)

    def permits(self, record) -> bool:
        """Whether an already loaded record falls inside this scope."""
        if self.is_unrestricted:
            return True
        return str(getattr(record, self.owner_field, None)) == str(self.requester.user_id)

    def __repr__(self):
        role = self.requester.role.value if self.requester.role else None
        return f"<AccessScope user={self.requester.user_id} role={role} unrestricted={self.is_unrestricted}>"


def require_role(requester: Requester, allowed_roles, action: str) -> None:
    """Raise ``PermissionDenied`` unless the requester holds one of ``allowed_roles``."""
    if requester.role not in allowed_roles:
        raise PermissionDenied(f"Role is not permitted to {action}")
