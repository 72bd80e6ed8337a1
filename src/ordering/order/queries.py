"""Scoped order reads.

Every read goes through an ``AccessScope``. An order outside the requester's
scope is reported exactly like a missing one.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.order.order import Order, parse_status
from shared.access import AccessScope


def list_orders(scope: AccessScope, status=None):
    """Orders visible to the scope, newest first."""
    queryset = scope.apply(current_domain.repository_for(Order).query)
    if status:
        queryset = queryset.filter(status=parse_status(status).value)
    return queryset.order_by("-created_at").all().items


def get_order(scope: AccessScope, order_id) -> Order:
    """One order, if it exists and the scope may see it."""
    repo = current_domain.repository_for(Order)
    order = scope.apply(repo.query.filter(id=order_id)).all().first
    if order is None:
        raise ObjectNotFoundError(f"Order with id {order_id} does not exist")
    return order
