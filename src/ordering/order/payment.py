"""Order payment: commands and handler.

Payment is recorded, not collected: no gateway is involved. Customers can mark
their own order paid; any other payment change is an admin action. Payment
failure can be retried (failed → pending or failed → paid).
"""

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
class MarkOrderPaid:
    caller_id = Identifier(required=True)
    caller_role = String(choices=Role, default=Role.USER.value)
    order_id = Identifier(required=True)


@ordering.command(part_of="Order")
class UpdatePaymentStatus:
    caller_id = Identifier(required=True)
    caller_role = String(choices=Role, default=Role.USER.value)
    order_id = Identifier(required=True)
    payment_status = String(required=True, max_length=20)


@ordering.command_handler(part_of=Order)
class OrderPaymentHandler:
    @handle(MarkOrderPaid)
    def mark_order_paid(self, command):
        caller = Caller.from_command(command)
        repo = current_domain.repository_for(Order)
        order = repo.get_for(caller, command.order_id)

        order.mark_paid(changed_by=caller.user_id)
        repo.add(order)

        logger.info("Order marked paid", order_id=str(order.id), status=order.status, caller_id=caller.user_id)
        return order

    @handle(UpdatePaymentStatus)
    def update_payment_status(self, command):
        caller = Caller.from_command(command)
        if not caller.is_admin:
            raise Forbidden("Only administrators can change payment status")

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous = order.payment_status
        order.change_payment_status(command.payment_status, changed_by=caller.user_id)
        repo.add(order)

        logger.info(
            "Order payment status changed",
            order_id=str(order.id),
            previous_payment_status=previous,
            new_payment_status=order.payment_status,
            status=order.status,
        )
        return order
