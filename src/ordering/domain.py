"""Ordering bounded context: products, shopping carts, orders and invoices.

Orders are standard CQRS aggregates guarded by optimistic versioning; the
invoice issuer relies on that version check to assign numbers exactly once.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

ordering = Domain(name="ordering")

logger = get_logger(__name__)
