"""Client-side sign-in state.

``login`` is the only path that merges the anonymous cart, and it merges
exactly once per successful login. ``resume`` restores a stored identity at
startup and never merges. ``logout`` forgets the identity and leaves every
cart alone.
"""

from client.api import StorefrontAPI, StorefrontAPIError, StorefrontUnavailable
from client.cart import AnonymousCart, CartMergeCoordinator, CartRefreshSignal, MergeReport
from client.storage import AUTH_KEY, LocalStore
from shared.access import Requester
from shared.logging import get_logger

logger = get_logger(__name__)


class AuthSession:
    def __init__(self, api: StorefrontAPI, store: LocalStore, refresh_signal: CartRefreshSignal | None = None):
        self.api = api
        self.store = store
        self.refresh_signal = refresh_signal or CartRefreshSignal()
        self.anonymous_cart = AnonymousCart(store)
        self.user = None
        self.last_merge: MergeReport | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.api.token is not None

    @property
    def requester(self) -> Requester | None:
        if not self.user:
            return None
        return Requester.from_claims(self.user.get("id"), self.user.get("role"))

    def login(self, email, password) -> dict:
        """Sign in, persist the identity, then merge the anonymous cart."""
        response = self.api.login(email, password)
        self.api.token = response["token"]
        self.user = response["user"]
        self.store.set(AUTH_KEY, {"token": self.api.token, "user": self.user})
        logger.info("Signed in", user_id=self.user.get("id"))

        coordinator = CartMergeCoordinator(self.api, self.store, self.refresh_signal)
        self.last_merge = coordinator.merge()
        return self.user

    def resume(self) -> bool:
        """Restore a previously stored identity. Does not touch any cart."""
        auth = self.store.get(AUTH_KEY)
        if not isinstance(auth, dict) or not auth.get("token"):
            return False
        self.api.token = auth["token"]
        self.user = auth.get("user")
        return True

    def logout(self) -> None:
        """Revoke the server session (best effort) and forget the local identity."""
        if self.api.token:
            try:
                self.api.logout()
            except (StorefrontAPIError, StorefrontUnavailable) as exc:
                logger.warning("Logout request failed", error=str(exc))
        self.api.token = None
        self.user = None
        self.store.remove(AUTH_KEY)
