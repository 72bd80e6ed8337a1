"""Order aggregate (CQRS) with its status state machine.

Orders are created at checkout and afterwards change in only two ways: the
status moves through the lifecycle below, and an invoice number is assigned
once. Both go through aggregate methods so that the optimistic version on the
aggregate guards every write.

State Machine:
    pending → approved | processing | shipped | delivered | cancelled
    approved, processing, shipped → any recognized status
    delivered, cancelled: terminal

Staff may skip ahead (``pending → shipped``) or step back
(``processing → approved``). Terminal orders never change again.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from ordering.domain import ordering
from ordering.order.events import (
    InvoiceNumberAssigned,
    OrderApproved,
    OrderPlaced,
    OrderStatusChanged,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(Enum):
    CASH_ON_DELIVERY = "cod"
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"
    WALLET = "wallet"


TERMINAL_STATES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


def parse_status(raw):
    """Resolve a requested status, case-insensitively. Unknown values are a validation error."""
    if isinstance(raw, OrderStatus):
        return raw
    try:
        return OrderStatus(str(raw or "").strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise ValidationError({"status": [f"Unknown order status {raw!r}; expected one of: {allowed}"]}) from None


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships to, captured at checkout and never changed."""

    line1 = String(required=True, max_length=255, sanitize=False)
    line2 = String(max_length=255, sanitize=False)
    city = String(required=True, max_length=100, sanitize=False)
    state = String(max_length=100, sanitize=False)
    postal_code = String(required=True, max_length=20, sanitize=False)
    country = String(required=True, max_length=100, sanitize=False)


@ordering.value_object(part_of="Order")
class OrderPricing:
    """Money summary of an order, locked at checkout.

    Tax and shipping are supplied by the caller; nothing here computes them.
    The total must equal subtotal + tax + shipping to the cent.
    """

    subtotal = Float(required=True, min_value=0.0)
    tax = Float(default=0.0, min_value=0.0)
    shipping = Float(default=0.0, min_value=0.0)
    total = Float(required=True, min_value=0.0)
    currency = String(max_length=3, default="USD")

    @invariant.post
    def total_is_sum_of_parts(self):
        expected = round((self.subtotal or 0) + (self.tax or 0) + (self.shipping or 0), 2)
        if abs(round(self.total or 0, 2) - expected) >= 0.005:
            raise ValidationError({"total": [f"Total {self.total} does not equal subtotal + tax + shipping ({expected})"]})


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A product line, with name and price snapshotted at checkout."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=200, sanitize=False)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)

    @property
    def line_total(self):
        return round(self.quantity * self.unit_price, 2)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    order_number = String(required=True, max_length=30, unique=True)
    customer_id = Identifier(required=True)
    items = HasMany(OrderItem)
    pricing = ValueObject(OrderPricing, required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.CASH_ON_DELIVERY.value)
    shipping_address = ValueObject(ShippingAddress)
    notes = Text(sanitize=False)
    invoice_number = String(max_length=40)
    approved_by = Identifier()
    approved_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def order_must_have_items(self):
        if not self.items:
            raise ValidationError({"items": ["An order must contain at least one item"]})

    @invariant.post
    def approval_provenance_is_complete(self):
        if (self.approved_at is None) != (self.approved_by is None):
            raise ValidationError({"approved_by": ["Approver and approval time are recorded together"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_id,
        items_data,
        tax=0.0,
        shipping=0.0,
        payment_method=PaymentMethod.CASH_ON_DELIVERY.value,
        shipping_address=None,
        notes=None,
        order_number_prefix="ORD",
    ):
        """Create a pending order from line data (product_id, name, quantity, unit_price)."""
        now = datetime.now(UTC)
        items = [
            OrderItem(
                product_id=data["product_id"],
                name=data["name"],
                quantity=data["quantity"],
                unit_price=data["unit_price"],
            )
            for data in items_data
        ]
        subtotal = round(sum(item.line_total for item in items), 2)
        tax = round(tax or 0.0, 2)
        shipping = round(shipping or 0.0, 2)

        order = cls(
            order_number=f"{order_number_prefix}-{now:%Y%m%d}-{uuid4().hex[:6].upper()}",
            customer_id=customer_id,
            items=items,
            pricing=OrderPricing(
                subtotal=subtotal,
                tax=tax,
                shipping=shipping,
                total=round(subtotal + tax + shipping, 2),
            ),
            status=OrderStatus.PENDING.value,
            payment_method=payment_method,
            shipping_address=ShippingAddress(**shipping_address) if isinstance(shipping_address, dict) else shipping_address,
            notes=notes,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                customer_id=str(customer_id),
                item_count=len(items),
                total=order.pricing.total,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    @property
    def is_terminal(self):
        return OrderStatus(self.status) in TERMINAL_STATES

    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if current in TERMINAL_STATES:
            raise ValidationError(
                {"status": [f"Order is {current.value} and can no longer move to {target_status.value}"]}
            )

    def transition_to(self, new_status, actor_id):
        """Move to ``new_status`` on behalf of ``actor_id``.

        The first entry into ``approved`` records who approved the order and
        when. Later entries into ``approved`` leave that record untouched.
        Requesting the current status is accepted and changes nothing.
        """
        target = parse_status(new_status)
        self._assert_can_transition(target)

        current = OrderStatus(self.status)
        if target == current:
            return

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                from_status=current.value,
                to_status=target.value,
                changed_by=str(actor_id),
                changed_at=now,
            )
        )

        if target == OrderStatus.APPROVED and self.approved_at is None:
            with atomic_change(self):
                self.approved_at = now
                self.approved_by = actor_id
            self.raise_(
                OrderApproved(
                    order_id=str(self.id),
                    approved_by=str(actor_id),
                    approved_at=now,
                )
            )

    # -------------------------------------------------------------------
    # Invoice number
    # -------------------------------------------------------------------
    def assign_invoice_number(self, invoice_number):
        """Record the invoice number. It can be set exactly once."""
        if self.invoice_number:
            raise ValidationError({"invoice_number": ["Invoice number is already assigned"]})

        now = datetime.now(UTC)
        self.invoice_number = invoice_number
        self.updated_at = now

        self.raise_(
            InvoiceNumberAssigned(
                order_id=str(self.id),
                invoice_number=invoice_number,
                assigned_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Projection
    # -------------------------------------------------------------------
    def to_summary(self):
        return {
            "id": str(self.id),
            "order_number": self.order_number,
            "customer_id": str(self.customer_id),
            "status": self.status,
            "payment_method": self.payment_method,
            "items": [
                {
                    "product_id": str(item.product_id),
                    "name": item.name,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price,
                    "line_total": item.line_total,
                }
                for item in self.items
            ],
            "subtotal": self.pricing.subtotal,
            "tax": self.pricing.tax,
            "shipping": self.pricing.shipping,
            "total": self.pricing.total,
            "shipping_address": self.shipping_address.to_dict() if self.shipping_address else None,
            "notes": self.notes,
            "invoice_number": self.invoice_number,
            "approved_by": str(self.approved_by) if self.approved_by else None,
            "approved_at": self.approved_at.isoformat() if self.approved_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
