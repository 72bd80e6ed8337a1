"""Sign-in and sign-out.

Credentials are checked here, outside any command, so that plaintext
passwords never travel through the command pipeline. Only the resulting
session is created through ``StartSession``.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.query import Q

from identity.domain import identity
from identity.session.session import Session
from identity.shared.email import EmailAddress
from identity.shared.password import verify_password
from identity.user.user import User
from shared.access import NotAuthenticated, Requester
from shared.logging import get_logger

logger = get_logger(__name__)


@identity.command(part_of="Session")
class StartSession:
    user_id: Identifier(required=True)


@identity.command(part_of="Session")
class EndSession:
    token: String(required=True, max_length=128)


@identity.command_handler(part_of=Session)
class SessionHandler:
    @handle(StartSession)
    def start_session(self, command):
        session = Session.start(user_id=command.user_id)
        current_domain.repository_for(Session).add(session)
        return session.token

    @handle(EndSession)
    def end_session(self, command):
        repo = current_domain.repository_for(Session)
        session = _active_session(command.token)
        session.revoke()
        repo.add(session)


def _active_session(token):
    if not token:
        raise NotAuthenticated()
    sessions = current_domain.repository_for(Session).find(Q(token=token))
    session = sessions.first
    if session is None or not session.is_active:
        raise NotAuthenticated("Invalid or expired token")
    return session


def authenticate(email, password):
    """Verify credentials and open a session.

    Returns ``(token, user)``. Raises ``NotAuthenticated`` with the same
    message whether the email is unknown or the password is wrong.
    """
    try:
        normalized = EmailAddress.normalized(email).address
    except ValidationError:
        raise NotAuthenticated("Invalid email or password") from None

    user = current_domain.repository_for(User).find(Q(email=normalized)).first
    if user is None or not verify_password(password, user.password_hash):
        logger.info("login_rejected", email=normalized)
        raise NotAuthenticated("Invalid email or password")

    token = current_domain.process(StartSession(user_id=user.id), asynchronous=False)
    logger.info("login_succeeded", user_id=str(user.id))
    return token, user


def resolve_requester(token) -> Requester:
    """Map a bearer token to the requester it was issued to."""
    session = _active_session(token)
    try:
        user = current_domain.repository_for(User).get(session.user_id)
    except ObjectNotFoundError:
        raise NotAuthenticated("Invalid or expired token") from None
    return Requester.from_claims(user.id, user.role)
