"""Invoice view model: everything an invoice shows, computed once.

The same ``InvoiceView`` feeds the JSON payload, the inline HTML page and the
downloadable file, so the three never disagree. Building it is pure: no
writes, no clock. The caller resolves the order (within scope) and ensures
its invoice number first.
"""

from dataclasses import asdict, dataclass
from datetime import datetime

from protean.exceptions import ValidationError

from ordering.directory.port import UserDirectory


@dataclass(frozen=True)
class InvoiceLine:
    name: str
    quantity: int
    unit_price: float
    line_total: float


@dataclass(frozen=True)
class BillTo:
    name: str | None
    email: str | None
    phone: str | None
    address_lines: tuple[str, ...] = ()


@dataclass(frozen=True)
class InvoiceView:
    invoice_number: str
    invoice_date: datetime
    order_id: str
    order_number: str
    status: str
    payment_method: str | None
    bill_to: BillTo
    lines: tuple[InvoiceLine, ...]
    subtotal: float
    total: float
    tax: float | None = None
    shipping: float | None = None
    approved_by_name: str | None = None
    currency: str = "USD"
    notes: str | None = None

    @property
    def display_date(self) -> str:
        """``Month D, YYYY``, e.g. ``March 5, 2024``."""
        return f"{self.invoice_date:%B} {self.invoice_date.day}, {self.invoice_date.year}"

    @property
    def filename(self) -> str:
        return f"invoice-{self.invoice_number}.html"

    def to_dict(self):
        data = asdict(self)
        data["invoice_date"] = self.invoice_date.isoformat()
        data["display_date"] = self.display_date
        data["bill_to"]["address_lines"] = list(self.bill_to.address_lines)
        data["lines"] = [asdict(line) for line in self.lines]
        return data


def _address_lines(address) -> tuple[str, ...]:
    if address is None:
        return ()

    lines = [address.line1]
    if address.line2:
        lines.append(address.line2)
    region = " ".join(part for part in (address.state, address.postal_code) if part)
    lines.append(", ".join(part for part in (address.city, region) if part))
    lines.append(address.country)
    return tuple(line for line in lines if line)


def _non_zero(amount):
    return amount if amount else None


def build_invoice_view(order, directory: UserDirectory) -> InvoiceView:
    """Assemble the invoice for ``order``. The total is the stored one, never recomputed."""
    if not order.invoice_number:
        raise ValidationError({"invoice_number": ["Invoice number has not been issued for this order"]})

    customer = directory.lookup(order.customer_id)
    approver = directory.lookup(order.approved_by) if order.approved_by else None

    bill_to = BillTo(
        name=(customer.name or customer.email) if customer else None,
        email=customer.email if customer else None,
        phone=customer.phone if customer else None,
        address_lines=_address_lines(order.shipping_address),
    )

    pricing = order.pricing
    return InvoiceView(
        invoice_number=order.invoice_number,
        invoice_date=order.approved_at or order.created_at,
        order_id=str(order.id),
        order_number=order.order_number,
        status=order.status,
        payment_method=order.payment_method,
        bill_to=bill_to,
        lines=tuple(
            InvoiceLine(
                name=item.name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                line_total=item.line_total,
            )
            for item in order.items
        ),
        subtotal=pricing.subtotal,
        tax=_non_zero(pricing.tax),
        shipping=_non_zero(pricing.shipping),
        total=pricing.total,
        approved_by_name=approver.name if approver else None,
        currency=pricing.currency or "USD",
        notes=order.notes,
    )
