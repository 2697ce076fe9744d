"""Cart management: commands and handler.

Handles opening the caller's cart, cart-level notes, discounts and clearing.
"""

import json

import structlog
from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.access import Caller, Role
from ordering.cart.cart import Cart
from ordering.domain import ordering
from ordering.shared.localized_text import localized_text

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Cart")
class OpenCart:
    """Return the caller's active cart, creating an empty one if needed."""

    caller_id = Identifier(required=True)
    caller_role = String(choices=Role, default=Role.USER.value)


@ordering.command(part_of="Cart")
class UpdateCartNotes:
    caller_id = Identifier(required=True)
    caller_role = String(choices=Role, default=Role.USER.value)
    notes = Text()  # JSON: {en?, ar?}; absent clears


@ordering.command(part_of="Cart")
class ApplyCartDiscount:
    caller_id = Identifier(required=True)
    caller_role = String(choices=Role, default=Role.USER.value)
    discount = Float(required=True)
    description = Text()  # JSON: {en?, ar?}


@ordering.command(part_of="Cart")
class ClearCart:
    caller_id = Identifier(required=True)
    caller_role = String(choices=Role, default=Role.USER.value)


def open_cart_for(repo, owner_id) -> Cart:
    """Find the owner's active cart.

    An abandoned cart is brought back before a new one is created, so a
    returning customer finds the items they left behind.
    """
    cart = repo.active_for(owner_id)
    if cart is not None:
        return cart

    abandoned = repo.latest_abandoned_for(owner_id)
    if abandoned is not None:
        abandoned.reactivate()
        repo.add(abandoned)
        logger.info("Abandoned cart reactivated", cart_id=str(abandoned.id), owner_id=str(owner_id))
        return abandoned

    cart = Cart.create(owner_id=str(owner_id))
    repo.add(cart)
    logger.info("Cart created", cart_id=str(cart.id), owner_id=str(owner_id))
    return cart


def _notes(raw, field):
    if raw is None:
        return None
    return localized_text(json.loads(raw) if isinstance(raw, str) else raw, field)


@ordering.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(OpenCart)
    def open_cart(self, command):
        caller = Caller.from_command(command)
        return open_cart_for(current_domain.repository_for(Cart), caller.user_id)

    @handle(UpdateCartNotes)
    def update_cart_notes(self, command):
        caller = Caller.from_command(command)
        notes = _notes(command.notes, "notes")

        repo = current_domain.repository_for(Cart)
        cart = repo.require_active_for(caller.user_id)
        cart.update_notes(notes)
        repo.add(cart)
        return cart

    @handle(ApplyCartDiscount)
    def apply_cart_discount(self, command):
        caller = Caller.from_command(command)
        description = _notes(command.description, "discount_description")

        repo = current_domain.repository_for(Cart)
        cart = repo.require_active_for(caller.user_id)
        cart.apply_discount(command.discount, description)
        repo.add(cart)

        logger.info(
            "Cart discount applied",
            cart_id=str(cart.id),
            discount=cart.discount,
            total_price_after_discount=cart.total_price_after_discount,
        )
        return cart

    @handle(ClearCart)
    def clear_cart(self, command):
        caller = Caller.from_command(command)
        repo = current_domain.repository_for(Cart)
        cart = repo.require_active_for(caller.user_id)
        cart.clear()
        repo.add(cart)

        logger.info("Cart cleared", cart_id=str(cart.id), owner_id=caller.user_id)
        return cart
