"""Invoice number issuance.

An order gets its invoice number the first time anyone asks for its invoice,
and keeps it forever. Two concurrent first requests must end up with the same
number: the write is conditional on the order's version, so the slower writer
fails with ``ExpectedVersionError``, re-reads the order and returns whatever
the faster writer stored.
"""

import random
import time

from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

from ordering.order.order import Order
from shared.logging import get_logger

logger = get_logger(__name__)

DEFAULT_PREFIX = "INV"
DEFAULT_ATTEMPTS = 3


def generate_invoice_number(prefix=DEFAULT_PREFIX, now_ms=None, rng=random):
    """``<prefix>-<epoch milliseconds>-<3 digit random>``, e.g. ``INV-1718000000000-042``."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{prefix}-{now_ms}-{rng.randint(0, 999):03d}"


class InvoiceIssuer:
    def __init__(self, prefix=None, attempts=None, number_factory=None):
        self.prefix = prefix or getattr(current_domain, "INVOICE_PREFIX", DEFAULT_PREFIX)
        self.attempts = int(attempts or getattr(current_domain, "INVOICE_ISSUE_ATTEMPTS", DEFAULT_ATTEMPTS))
        self.number_factory = number_factory or (lambda: generate_invoice_number(self.prefix))

    def ensure_invoice_number(self, order: Order) -> str:
        """Return the order's invoice number, assigning one if it has none.

        An order that already has a number is returned untouched, without a
        write. Callers must use the returned value: after a lost race the
        ``order`` instance passed in is stale.
        """
        if order.invoice_number:
            return order.invoice_number

        repo = current_domain.repository_for(Order)
        order_id = order.id

        for attempt in range(1, self.attempts + 1):
            candidate = self.number_factory()
            order.assign_invoice_number(candidate)
            try:
                repo.add(order)
            except ExpectedVersionError:
                order = repo.get(order_id)
                if order.invoice_number:
                    logger.info(
                        "invoice_number_race_lost",
                        order_id=str(order_id),
                        discarded=candidate,
                        invoice_number=order.invoice_number,
                    )
                    return order.invoice_number
                logger.warning(
                    "invoice_number_write_conflict",
                    order_id=str(order_id),
                    attempt=attempt,
                )
                continue

            logger.info("invoice_number_assigned", order_id=str(order_id), invoice_number=candidate)
            return candidate

        raise ExpectedVersionError(
            f"Could not assign an invoice number to order {order_id} after {self.attempts} attempts"
        )


def ensure_invoice_number(order: Order) -> str:
    return InvoiceIssuer().ensure_invoice_number(order)
