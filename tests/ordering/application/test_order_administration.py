"""Application tests for staff status transitions and order deletion."""

import pytest
from ordering.order.order import Order, OrderItem
from ordering.order.status import DeleteOrder, TransitionOrderStatus
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from shared.access import PermissionDenied


def _persisted_order(customer_id="cust-001"):
    order = Order.place(
        customer_id=customer_id,
        items_data=[
            {"product_id": "prod-001", "name": "Espresso Beans", "quantity": 2, "unit_price": 12.50},
            {"product_id": "prod-002", "name": "Kettle", "quantity": 1, "unit_price": 40.00},
        ],
    )
    current_domain.repository_for(Order).add(order)
    return str(order.id)


def _transition(order_id, status, role="admin", actor_id="admin-1"):
    return current_domain.process(
        TransitionOrderStatus(order_id=order_id, status=status, actor_id=actor_id, actor_role=role),
        asynchronous=False,
    )


def _delete(order_id, role="superadmin", actor_id="root-1"):
    return current_domain.process(
        DeleteOrder(order_id=order_id, actor_id=actor_id, actor_role=role),
        asynchronous=False,
    )


class TestTransitionOrderStatus:
    @pytest.mark.parametrize("role", ["admin", "Superadmin", "ADMIN"])
    def test_staff_can_transition(self, role):
        order_id = _persisted_order()
        assert _transition(order_id, "approved", role=role) == "approved"
        assert current_domain.repository_for(Order).get(order_id).status == "approved"

    @pytest.mark.parametrize("role", ["customer", "support", None, "wizard"])
    def test_other_roles_are_denied(self, role):
        order_id = _persisted_order()
        with pytest.raises(PermissionDenied):
            _transition(order_id, "approved", role=role)
        assert current_domain.repository_for(Order).get(order_id).status == "pending"

    def test_status_is_case_insensitive(self):
        order_id = _persisted_order()
        assert _transition(order_id, "SHIPPED") == "shipped"

    def test_unknown_status_is_rejected_before_lookup(self):
        with pytest.raises(ValidationError):
            _transition("no-such-order", "refunded")

    def test_role_is_checked_before_status(self):
        with pytest.raises(PermissionDenied):
            _transition("no-such-order", "refunded", role="customer")

    def test_missing_order(self):
        with pytest.raises(ObjectNotFoundError):
            _transition("no-such-order", "approved")

    def test_approval_records_actor(self):
        order_id = _persisted_order()
        _transition(order_id, "approved", actor_id="admin-7")

        order = current_domain.repository_for(Order).get(order_id)
        assert order.approved_by == "admin-7"
        assert order.approved_at is not None

    def test_terminal_order_is_rejected(self):
        order_id = _persisted_order()
        _transition(order_id, "cancelled")
        with pytest.raises(ValidationError):
            _transition(order_id, "processing")
        assert current_domain.repository_for(Order).get(order_id).status == "cancelled"


class TestDeleteOrder:
    def test_superadmin_deletes_order_and_items(self):
        order_id = _persisted_order()
        _delete(order_id)

        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Order).get(order_id)
        assert current_domain.repository_for(OrderItem)._dao.query.all().total == 0

    @pytest.mark.parametrize("role", ["admin", "support", "customer", None])
    def test_only_superadmin_may_delete(self, role):
        order_id = _persisted_order()
        with pytest.raises(PermissionDenied):
            _delete(order_id, role=role)
        assert current_domain.repository_for(Order).get(order_id)

    def test_missing_order(self):
        with pytest.raises(ObjectNotFoundError):
            _delete("no-such-order")
