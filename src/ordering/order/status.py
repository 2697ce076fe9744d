"""Order status transitions: admin-only moves along the status machine."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.access import Caller, Role
from ordering.domain import ordering
from ordering.errors import Forbidden
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class TransitionOrderStatus:
    caller_id = Identifier(required=True)
    caller_role = String(choices=Role, default=Role.USER.value)
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@ordering.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(TransitionOrderStatus)
    def transition_order_status(self, command):
        caller = Caller.from_command(command)
        if not caller.is_admin:
            raise Forbidden("Only administrators can change order status")

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous = order.status
        order.transition_to(command.status, changed_by=caller.user_id)
        repo.add(order)

        logger.info(
            "Order status changed",
            order_id=str(order.id),
            previous_status=previous,
            new_status=order.status,
            admin_id=caller.user_id,
        )
        return order
