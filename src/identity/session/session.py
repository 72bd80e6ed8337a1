"""Session aggregate: an issued bearer token and its lifetime."""

import secrets
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String

from identity.domain import identity


@identity.aggregate
class Session:
    token: String(required=True, max_length=128, unique=True)
    user_id: Identifier(required=True)
    created_at: DateTime()
    revoked_at: DateTime()

    @property
    def is_active(self):
        return self.revoked_at is None

    @classmethod
    def start(cls, user_id):
        from identity.session.events import SessionStarted

        now = datetime.now(UTC)
        session = cls(
            token=secrets.token_urlsafe(32),
            user_id=user_id,
            created_at=now,
        )
        session.raise_(
            SessionStarted(
                session_id=session.id,
                user_id=user_id,
                started_at=now,
            )
        )
        return session

    def revoke(self):
        from identity.session.events import SessionRevoked

        if not self.is_active:
            raise ValidationError({"session": ["Session is already revoked"]})

        now = datetime.now(UTC)
        self.revoked_at = now
        self.raise_(
            SessionRevoked(
                session_id=self.id,
                user_id=self.user_id,
                revoked_at=now,
            )
        )
