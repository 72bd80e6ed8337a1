"""User directory port: contact details for people named on an order.

Ordering stores only user ids. Invoices need names and emails, which live
in the identity context; this port is the only way ordering reads them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class UserContact:
    user_id: str
    name: str | None = None
    email: str | None = None
    phone: str | None = None


class UserDirectory(ABC):
    """Abstract interface for user directory adapters."""

    @abstractmethod
    def lookup(self, user_id) -> UserContact | None:
        """Return the contact for ``user_id``, or ``None`` if there is no such user."""
        ...
