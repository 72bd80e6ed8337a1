"""User directory backed by the identity domain's User aggregate."""

from ordering.directory.port import UserContact, UserDirectory


class IdentityUserDirectory(UserDirectory):
    def lookup(self, user_id):
        if not user_id:
            return None

        from identity.domain import identity
        from identity.user.user import User

        with identity.domain_context():
            user = identity.repository_for(User).get_or_none(str(user_id))
            if user is None:
                return None
            return UserContact(
                user_id=str(user.id),
                name=user.name,
                email=user.email,
                phone=user.phone,
            )
