"""Order cancellation: command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.access import Caller, Role
from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class CancelOrder:
    caller_id = Identifier(required=True)
    caller_role = String(choices=Role, default=Role.USER.value)
    order_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        caller = Caller.from_command(command)
        repo = current_domain.repository_for(Order)
        order = repo.get_for(caller, command.order_id)

        order.cancel(cancelled_by=Role.ADMIN.value if caller.is_admin else "customer")
        repo.add(order)

        logger.info("Order cancelled", order_id=str(order.id), cancelled_by=order.cancelled_by)
        return order
