"""Domain events for the Session aggregate."""

from protean.fields import DateTime, Identifier

from identity.domain import identity


@identity.event(part_of="Session")
class SessionStarted:
    """A user signed in and was issued a bearer token."""

    __version__ = 1

    session_id: Identifier(required=True)
    user_id: Identifier(required=True)
    started_at: DateTime(required=True)


@identity.event(part_of="Session")
class SessionRevoked:
    """A bearer token was revoked (the user signed out)."""

    __version__ = 1

    session_id: Identifier(required=True)
    user_id: Identifier(required=True)
    revoked_at: DateTime(required=True)
