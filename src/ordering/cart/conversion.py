"""Cart conversion: close the source cart once an order has been placed from it."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.domain import ordering

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Cart")
class ConvertCart:
    """Mark the cart converted and open a fresh active cart for its owner."""

    cart_id = Identifier(required=True)
    order_id = Identifier(required=True)


@ordering.command_handler(part_of=Cart)
class ConvertCartHandler:
    @handle(ConvertCart)
    def convert_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        cart.convert(command.order_id)
        repo.add(cart)

        fresh = Cart.create(owner_id=str(cart.owner_id))
        repo.add(fresh)

        logger.info(
            "Cart converted to order",
            cart_id=str(cart.id),
            order_id=str(command.order_id),
            new_cart_id=str(fresh.id),
        )
        return fresh
