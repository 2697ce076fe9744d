"""Order placement: command and handler."""

import json

import structlog
from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.access import Caller, Role
from ordering.domain import ordering
from ordering.order import validation
from ordering.order.order import Order
from ordering.shared.localized_text import localized_text
from ordering.shared.money import amounts_match, is_amount, items_total

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    caller_id = Identifier(required=True)
    caller_role = String(choices=Role, default=Role.USER.value)
    items = Text(required=True)  # JSON: list of {product_id, quantity, price}
    shipping_address = Text(required=True)  # JSON: {address, city, country, postal_code}
    payment_method = String(required=True, max_length=50)
    notes = Text()  # JSON: {en?, ar?}
    total_order_price = Float()  # Client's figure; never trusted
    cart_id = Identifier()


def _loads(value):
    return json.loads(value) if isinstance(value, str) else value


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        caller = Caller.from_command(command)

        items = validation.order_items(_loads(command.items))
        address = validation.shipping_address(_loads(command.shipping_address))
        payment_method = validation.payment_method(command.payment_method)
        notes = localized_text(_loads(command.notes), "notes") if command.notes else None

        computed_total = items_total(items)
        supplied_total = command.total_order_price
        if supplied_total is not None and not (is_amount(supplied_total) and amounts_match(supplied_total, computed_total)):
            logger.warning(
                "Ignoring client-supplied order total",
                owner_id=caller.user_id,
                supplied_total=supplied_total,
                computed_total=computed_total,
            )

        order = Order.place(
            owner_id=caller.user_id,
            items_data=items,
            shipping_address=address,
            payment_method=payment_method,
            notes=notes,
            cart_id=command.cart_id,
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            owner_id=caller.user_id,
            total_order_price=order.total_order_price,
            item_count=len(items),
        )
        return order
