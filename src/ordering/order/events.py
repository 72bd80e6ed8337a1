"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A customer checked out and a pending order was created."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    item_count = Integer(required=True)
    total = Float(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """Staff moved the order to a different status."""

    __version__ = 1

    order_id = Identifier(required=True)
    from_status = String(required=True)
    to_status = String(required=True)
    changed_by = Identifier(required=True)
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderApproved:
    """The order entered ``approved`` for the first time."""

    __version__ = 1

    order_id = Identifier(required=True)
    approved_by = Identifier(required=True)
    approved_at = DateTime(required=True)


@ordering.event(part_of="Order")
class InvoiceNumberAssigned:
    """The order received its (permanent) invoice number."""

    __version__ = 1

    order_id = Identifier(required=True)
    invoice_number = String(required=True)
    assigned_at = DateTime(required=True)
