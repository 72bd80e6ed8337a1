"""Application tests for invoice number issuance."""

import re
from unittest.mock import MagicMock, patch

import pytest
from ordering.invoice.issuer import InvoiceIssuer, ensure_invoice_number
from ordering.order.order import Order
from protean import current_domain
from protean.exceptions import ExpectedVersionError


def _persisted_order():
    order = Order.place(
        customer_id="cust-001",
        items_data=[{"product_id": "prod-001", "name": "Espresso Beans", "quantity": 1, "unit_price": 12.50}],
    )
    current_domain.repository_for(Order).add(order)
    return current_domain.repository_for(Order).get(order.id)


def _numbers(*values):
    source = iter(values)
    return lambda: next(source)


class TestEnsureInvoiceNumber:
    def test_assigns_and_persists(self):
        order = _persisted_order()

        number = ensure_invoice_number(order)

        assert re.fullmatch(r"INV-\d{13}-\d{3}", number)
        assert current_domain.repository_for(Order).get(order.id).invoice_number == number

    def test_existing_number_is_returned_without_a_write(self):
        order = _persisted_order()
        number = ensure_invoice_number(order)
        stored = current_domain.repository_for(Order).get(order.id)
        version = stored._version

        assert ensure_invoice_number(stored) == number
        assert current_domain.repository_for(Order).get(order.id)._version == version

    def test_repeated_requests_return_the_same_number(self):
        order = _persisted_order()
        issuer = InvoiceIssuer(number_factory=_numbers("INV-1-001", "INV-2-002"))

        first = issuer.ensure_invoice_number(order)
        second = issuer.ensure_invoice_number(current_domain.repository_for(Order).get(order.id))

        assert first == second == "INV-1-001"

    def test_custom_prefix(self):
        number = InvoiceIssuer(prefix="BILL").ensure_invoice_number(_persisted_order())
        assert number.startswith("BILL-")


class TestConcurrentIssuance:
    def test_losing_writer_adopts_the_stored_number(self):
        order = _persisted_order()
        repo = current_domain.repository_for(Order)
        # Two requests loaded the order before either wrote
        first_copy = repo.get(order.id)
        second_copy = repo.get(order.id)

        winner = InvoiceIssuer(number_factory=_numbers("INV-100-001")).ensure_invoice_number(first_copy)
        loser = InvoiceIssuer(number_factory=_numbers("INV-200-002")).ensure_invoice_number(second_copy)

        assert winner == loser == "INV-100-001"
        assert repo.get(order.id).invoice_number == "INV-100-001"

    def test_conflict_without_a_stored_number_retries(self):
        order = _persisted_order()
        repo = current_domain.repository_for(Order)
        stale = repo.get(order.id)

        # An unrelated write bumps the version but leaves no invoice number
        fresh = repo.get(order.id)
        fresh.transition_to("approved", actor_id="admin-1")
        repo.add(fresh)

        number = InvoiceIssuer(number_factory=_numbers("INV-1-001", "INV-2-002")).ensure_invoice_number(stale)

        assert number == "INV-2-002"
        stored = repo.get(order.id)
        assert stored.invoice_number == "INV-2-002"
        assert stored.status == "approved"

    def test_gives_up_after_the_configured_attempts(self):
        repo = MagicMock()
        repo.add.side_effect = ExpectedVersionError("conflict")
        repo.get.return_value = MagicMock(invoice_number=None)
        issuer = InvoiceIssuer(prefix="INV", attempts=2, number_factory=_numbers("INV-1-001", "INV-2-002"))

        with patch("ordering.invoice.issuer.current_domain", new_callable=MagicMock) as domain:
            domain.repository_for.return_value = repo
            with pytest.raises(ExpectedVersionError):
                issuer.ensure_invoice_number(MagicMock(id="order-1", invoice_number=None))

        assert repo.add.call_count == 2
        assert repo.get.call_count == 2
