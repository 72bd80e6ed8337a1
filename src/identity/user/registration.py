"""User registration and role assignment: commands and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.query import Q

from identity.domain import identity
from identity.shared.email import EmailAddress
from identity.user.user import User


@identity.command(part_of="User")
class RegisterUser:
    """Create an account. The password is hashed before the command is built."""

    name: String(required=True, max_length=100, sanitize=False)
    email: String(required=True, max_length=254)
    password_hash: String(required=True, max_length=128)
    phone: String(max_length=20)
    role: String(max_length=50, default="customer")


@identity.command(part_of="User")
class ChangeUserRole:
    user_id: Identifier(required=True)
    role: String(required=True, max_length=50)


@identity.command_handler(part_of=User)
class UserAccountHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)

        email = EmailAddress.normalized(command.email).address
        if repo.exists(Q(email=email)):
            raise ValidationError({"email": ["Email is already registered"]})

        user = User.register(
            name=command.name,
            email=email,
            password_hash=command.password_hash,
            phone=command.phone,
            role=command.role or "customer",
        )
        repo.add(user)
        return str(user.id)

    @handle(ChangeUserRole)
    def change_user_role(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.change_role(command.role)
        repo.add(user)
