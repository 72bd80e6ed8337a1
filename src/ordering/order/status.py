"""Staff operations on orders: status transitions and deletion.

Checks run in a fixed order so that a rejected request never touches the
store: role first, then the requested status, then the order lookup.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order, OrderItem, parse_status
from shared.access import DELETE_ROLES, TRANSITION_ROLES, Requester, require_role
from shared.logging import get_logger

logger = get_logger(__name__)


@ordering.command(part_of="Order")
class TransitionOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=50)
    actor_id = Identifier(required=True)
    actor_role = String(max_length=50)


@ordering.command(part_of="Order")
class DeleteOrder:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(max_length=50)


@ordering.command_handler(part_of=Order)
class OrderAdministrationHandler:
    @handle(TransitionOrderStatus)
    def transition_order_status(self, command):
        actor = Requester.from_claims(command.actor_id, command.actor_role)
        require_role(actor, TRANSITION_ROLES, "change order status")
        target = parse_status(command.status)

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous = order.status

        order.transition_to(target, actor_id=actor.user_id)
        repo.add(order)

        logger.info(
            "order_status_changed",
            order_id=str(order.id),
            from_status=previous,
            to_status=order.status,
            actor_id=actor.user_id,
        )
        return order.status

    @handle(DeleteOrder)
    def delete_order(self, command):
        actor = Requester.from_claims(command.actor_id, command.actor_role)
        require_role(actor, DELETE_ROLES, "delete orders")

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        # Hard delete: line items first, then the order itself
        item_dao = current_domain.repository_for(OrderItem)._dao
        for item in list(order.items):
            item_dao.delete(item)
        repo._dao.delete(order)

        logger.warning(
            "order_deleted",
            order_id=str(command.order_id),
            order_number=order.order_number,
            actor_id=actor.user_id,
        )
