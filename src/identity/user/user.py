"""User aggregate: a person who can sign in to the storefront."""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from identity.domain import identity
from identity.shared.email import EmailAddress
from shared.access import Role, normalize_role


@identity.aggregate
class User:
    """An account holder: a shopper, a support agent, or an operator.

    Email is the login name and is stored lowercased. The role decides which
    orders the user can see and what they may do to them.
    """

    name: String(required=True, max_length=100, sanitize=False)
    email: String(required=True, max_length=254, unique=True)
    phone: String(max_length=20)
    role: String(choices=Role, default=Role.CUSTOMER.value)
    password_hash: String(required=True, max_length=128)
    created_at: DateTime()

    @classmethod
    def register(cls, name, email, password_hash, phone=None, role=Role.CUSTOMER.value):
        from identity.user.events import UserRegistered

        resolved_role = normalize_role(role)
        if resolved_role is None:
            raise ValidationError({"role": [f"Unknown role: {role!r}"]})

        email_vo = EmailAddress.normalized(email)
        now = datetime.now(UTC)

        user = cls(
            name=name.strip(),
            email=email_vo.address,
            phone=phone,
            role=resolved_role.value,
            password_hash=password_hash,
            created_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=user.id,
                name=user.name,
                email=user.email,
                role=user.role,
                registered_at=now,
            )
        )
        return user

    def change_role(self, new_role):
        from identity.user.events import UserRoleChanged

        resolved_role = normalize_role(new_role)
        if resolved_role is None:
            raise ValidationError({"role": [f"Unknown role: {new_role!r}"]})
        if resolved_role.value == self.role:
            return

        previous = self.role
        self.role = resolved_role.value
        self.raise_(
            UserRoleChanged(
                user_id=self.id,
                previous_role=previous,
                new_role=self.role,
            )
        )

    def to_profile(self):
        """Public projection of the account (never includes the password hash)."""
        return {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "role": self.role,
        }
