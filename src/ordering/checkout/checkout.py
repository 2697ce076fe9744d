"""Checkout: turn the caller's active cart into an order.

The order is placed first, then the cart is marked converted and a fresh
active cart is opened. The two writes are separate aggregates with no shared
transaction.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.access import Caller, Role
from ordering.cart.cart import Cart
from ordering.cart.conversion import ConvertCart
from ordering.domain import ordering
from ordering.order.creation import PlaceOrder
from ordering.order.order import Order
from ordering.shared.money import discounted_unit_price

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class CheckoutCart:
    caller_id = Identifier(required=True)
    caller_role = String(choices=Role, default=Role.USER.value)
    shipping_address = Text(required=True)  # JSON: {address, city, country, postal_code}
    payment_method = String(required=True, max_length=50)
    notes = Text()  # JSON: {en?, ar?}; defaults to the cart notes


def order_lines_from(cart: Cart) -> list[dict]:
    """Cart items as order lines, with the cart discount folded into each unit price."""
    return [
        {
            "product_id": str(item.product_id),
            "quantity": item.quantity,
            "price": discounted_unit_price(item.unit_price, cart.discount or 0.0),
        }
        for item in cart.items
    ]


@ordering.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(CheckoutCart)
    def checkout_cart(self, command):
        caller = Caller.from_command(command)
        cart = current_domain.repository_for(Cart).require_active_for(caller.user_id)
        if not cart.items:
            raise ValidationError({"cart": ["Cannot check out an empty cart"]})

        notes = command.notes
        if notes is None and cart.notes is not None:
            notes = json.dumps(cart.notes.as_payload())

        order = current_domain.process(
            PlaceOrder(
                caller_id=caller.user_id,
                caller_role=caller.role,
                items=json.dumps(order_lines_from(cart)),
                shipping_address=command.shipping_address,
                payment_method=command.payment_method,
                notes=notes,
                cart_id=str(cart.id),
            ),
            asynchronous=False,
        )
        current_domain.process(ConvertCart(cart_id=str(cart.id), order_id=str(order.id)), asynchronous=False)

        logger.info(
            "Checkout complete",
            cart_id=str(cart.id),
            order_id=str(order.id),
            total_order_price=order.total_order_price,
        )
        return order
