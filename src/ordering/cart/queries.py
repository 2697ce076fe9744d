"""Read-side cart queries."""

from dataclasses import dataclass, field

from protean.utils.globals import current_domain

from ordering.access import Caller
from ordering.cart.admin import require_admin
from ordering.cart.cart import Cart


@dataclass
class CartListing:
    carts: list = field(default_factory=list)
    total_carts: int = 0
    non_empty_carts: int = 0
    total_quantity: int = 0


def list_all_carts(caller: Caller) -> CartListing:
    """Every cart in the store, newest first, with counts. Admin only."""
    require_admin(caller)

    carts = current_domain.repository_for(Cart).every_cart()
    return CartListing(
        carts=carts,
        total_carts=len(carts),
        non_empty_carts=sum(1 for cart in carts if cart.items),
        total_quantity=sum(cart.total_quantity for cart in carts),
    )
