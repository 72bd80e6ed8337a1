"""FastAPI dependencies that turn a bearer token into a ``Requester``.

The lookup always runs inside the identity domain context, so routers of
other contexts can depend on it without caring which context is active.
"""

from fastapi import Header

from identity.domain import identity
from identity.session.login import resolve_requester
from shared.access import NotAuthenticated, Requester


def bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise NotAuthenticated()
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise NotAuthenticated("Malformed Authorization header")
    return token.strip()


async def current_token(authorization: str | None = Header(default=None)) -> str:
    return bearer_token(authorization)


async def current_requester(authorization: str | None = Header(default=None)) -> Requester:
    token = bearer_token(authorization)
    with identity.domain_context():
        return resolve_requester(token)
