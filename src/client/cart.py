"""Anonymous cart handling and the login-time merge into the server cart.

Before sign-in, cart lines live on the device under ``guest_cart`` as
``{"items": [{"productId": ..., "quantity": ...}]}``. Right after a
successful login the ``CartMergeCoordinator`` replays those lines against the
server cart one by one. A line that fails is logged and skipped, never fatal,
and the anonymous cart is discarded either way.
"""

from dataclasses import dataclass, field

from client.api import StorefrontAPI, StorefrontAPIError, StorefrontUnavailable
from client.storage import GUEST_CART_KEY, LocalStore
from shared.logging import get_logger

logger = get_logger(__name__)


def _product_id_of(entry) -> str | None:
    product_id = entry.get("productId") or entry.get("product_id")
    if not product_id and isinstance(entry.get("product"), dict):
        product_id = entry["product"].get("_id") or entry["product"].get("id")
    return str(product_id) if product_id else None


def _quantity_of(entry) -> int:
    try:
        quantity = int(entry.get("quantity") or 1)
    except (TypeError, ValueError):
        return 1
    return max(quantity, 1)


class AnonymousCart:
    """The device-held cart of a visitor who has not signed in."""

    def __init__(self, store: LocalStore):
        self.store = store

    def _items(self) -> list:
        data = self.store.get(GUEST_CART_KEY) or {}
        items = data.get("items") if isinstance(data, dict) else None
        return items if isinstance(items, list) else []

    def items(self) -> list[dict]:
        """Lines as ``{"product_id", "quantity"}``, one per product, in first-seen order.

        Repeated entries for the same product are folded together. Entries
        with no recognizable product id are kept with ``product_id=None`` so
        the caller can report them.
        """
        folded: dict[str, dict] = {}
        orphans = []
        for entry in self._items():
            if not isinstance(entry, dict):
                continue
            product_id = _product_id_of(entry)
            quantity = _quantity_of(entry)
            if product_id is None:
                orphans.append({"product_id": None, "quantity": quantity})
            elif product_id in folded:
                folded[product_id]["quantity"] += quantity
            else:
                folded[product_id] = {"product_id": product_id, "quantity": quantity}
        return list(folded.values()) + orphans

    def add(self, product_id, quantity=1) -> None:
        items = self._items()
        for entry in items:
            if isinstance(entry, dict) and _product_id_of(entry) == str(product_id):
                entry["quantity"] = _quantity_of(entry) + quantity
                break
        else:
            items.append({"productId": str(product_id), "quantity": quantity})
        self.store.set(GUEST_CART_KEY, {"items": items})

    def remove(self, product_id) -> None:
        items = [e for e in self._items() if not (isinstance(e, dict) and _product_id_of(e) == str(product_id))]
        self.store.set(GUEST_CART_KEY, {"items": items})

    def count(self) -> int:
        return sum(line["quantity"] for line in self.items())

    def is_empty(self) -> bool:
        return not self._items()

    def clear(self) -> None:
        self.store.remove(GUEST_CART_KEY)


class CartRefreshSignal:
    """Notifies cart-state consumers (badges, counters) that the cart changed."""

    def __init__(self):
        self._listeners = []

    def subscribe(self, listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def notify(self) -> None:
        for listener in list(self._listeners):
            listener()


@dataclass
class MergeReport:
    merged: list[str] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def attempted(self) -> int:
        return len(self.merged) + len(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures


class CartMergeCoordinator:
    def __init__(self, api: StorefrontAPI, store: LocalStore, refresh_signal: CartRefreshSignal | None = None):
        self.api = api
        self.anonymous_cart = AnonymousCart(store)
        self.refresh_signal = refresh_signal or CartRefreshSignal()

    def merge(self) -> MergeReport:
        """Fold the anonymous cart into the signed-in user's server cart.

        Must be called once, right after a successful login. Returns what was
        merged and what failed. Never raises for a failed line.
        """
        report = MergeReport()
        if self.anonymous_cart.is_empty():
            return report

        try:
            for line in self.anonymous_cart.items():
                product_id = line["product_id"]
                if product_id is None:
                    report.failures[f"entry-{len(report.failures) + 1}"] = "missing product id"
                    logger.warning("guest_cart_entry_skipped", reason="missing product id")
                    continue
                try:
                    self.api.add_to_cart(product_id, line["quantity"])
                    report.merged.append(product_id)
                except Exception as exc:
                    report.failures[product_id] = str(exc) or type(exc).__name__
                    logger.warning(
                        "Failed to merge guest cart item",
                        product_id=product_id,
                        quantity=line["quantity"],
                        error=str(exc),
                        error_type=type(exc).__name__,
                    )
        finally:
            self.anonymous_cart.clear()

        logger.info("Guest cart merged", merged=len(report.merged), failed=len(report.failures))
        self.refresh_signal.notify()
        return report


class CartCounter:
    """Number of units in the cart, kept fresh through the refresh signal."""

    def __init__(self, session, refresh_signal: CartRefreshSignal):
        self.session = session
        self.value = 0
        refresh_signal.subscribe(self.refresh)

    def refresh(self) -> int:
        if self.session.is_authenticated:
            try:
                self.value = int(self.session.api.get_cart().get("item_count", 0))
            except (StorefrontAPIError, StorefrontUnavailable) as exc:
                logger.warning("Failed to refresh cart count", error=str(exc))
        else:
            self.value = self.session.anonymous_cart.count()
        return self.value
