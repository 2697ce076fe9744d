"""Cart item management: commands and handler.

Catalogue checks (existence and stock) happen here, before the aggregate is
touched. Stock is read, not reserved.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ordering.access import Caller, Role
from ordering.cart.cart import Cart
from ordering.catalogue import get_catalog
from ordering.domain import ordering
from ordering.errors import InsufficientStock
from ordering.shared.localized_text import localized_text

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Cart")
class AddItemsToCart:
    """Add one or more products to the caller's active cart."""

    caller_id = Identifier(required=True)
    caller_role = String(choices=Role, default=Role.USER.value)
    items = Text(required=True)  # JSON: list of {product_id, quantity, price?, notes?}
    notes = Text()  # JSON: {en?, ar?}


@ordering.command(part_of="Cart")
class UpdateCartItemQuantity:
    caller_id = Identifier(required=True)
    caller_role = String(choices=Role, default=Role.USER.value)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@ordering.command(part_of="Cart")
class RemoveCartItem:
    caller_id = Identifier(required=True)
    caller_role = String(choices=Role, default=Role.USER.value)
    product_id = Identifier(required=True)


@ordering.command(part_of="Cart")
class UpdateCartItemNotes:
    caller_id = Identifier(required=True)
    caller_role = String(choices=Role, default=Role.USER.value)
    product_id = Identifier(required=True)
    notes = Text()  # JSON: {en?, ar?}; absent clears


def _loads(value):
    return json.loads(value) if isinstance(value, str) else value


def _require_product(catalog, product_id):
    snapshot = catalog.lookup(str(product_id))
    if snapshot is None:
        raise ObjectNotFoundError({"product": [f"Product {product_id} not found"]})
    return snapshot


def _prepare_entries(cart, raw_items):
    """Resolve every requested item against the catalogue before anything changes."""
    if not isinstance(raw_items, list) or not raw_items:
        raise ValidationError({"items": ["At least one item is required"]})

    catalog = get_catalog()
    entries = []
    requested_totals: dict[str, int] = {}
    for raw in raw_items:
        if not isinstance(raw, dict):
            raise ValidationError({"items": ["Each item must be an object"]})
        product_id = raw.get("product_id") or raw.get("product")
        if not product_id:
            raise ValidationError({"product": ["Product is required"]})
        product_id = str(product_id)

        quantity = raw.get("quantity")
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        snapshot = _require_product(catalog, product_id)

        unit_price = raw.get("price", raw.get("unit_price"))
        if unit_price is None:
            unit_price = snapshot.price

        already_in_cart = cart.item_for(product_id).quantity if cart.item_for(product_id) else 0
        requested_totals[product_id] = requested_totals.get(product_id, already_in_cart) + quantity
        if snapshot.stock < requested_totals[product_id]:
            raise InsufficientStock(product_id, requested_totals[product_id], snapshot.stock)

        entries.append(
            {
                "product_id": product_id,
                "quantity": quantity,
                "unit_price": unit_price,
                "notes": localized_text(raw.get("notes"), "notes"),
            }
        )
    return entries


@ordering.command_handler(part_of=Cart)
class CartItemsHandler:
    @handle(AddItemsToCart)
    def add_items_to_cart(self, command):
        from ordering.cart.management import open_cart_for

        caller = Caller.from_command(command)
        repo = current_domain.repository_for(Cart)
        cart = open_cart_for(repo, caller.user_id)

        entries = _prepare_entries(cart, _loads(command.items))
        cart_notes = localized_text(_loads(command.notes), "notes") if command.notes else None

        cart.add_line_items(entries, notes=cart_notes)
        repo.add(cart)

        logger.info(
            "Items added to cart",
            cart_id=str(cart.id),
            owner_id=caller.user_id,
            products=[e["product_id"] for e in entries],
            total_price=cart.total_price,
        )
        return cart

    @handle(UpdateCartItemQuantity)
    def update_cart_item_quantity(self, command):
        caller = Caller.from_command(command)
        if command.quantity is None or command.quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        repo = current_domain.repository_for(Cart)
        cart = repo.require_active_for(caller.user_id)

        snapshot = _require_product(get_catalog(), command.product_id)
        if cart.item_for(command.product_id) is None:
            raise ObjectNotFoundError({"item": [f"Product {command.product_id} is not in the cart"]})
        if snapshot.stock < command.quantity:
            raise InsufficientStock(str(command.product_id), command.quantity, snapshot.stock)

        cart.update_item_quantity(command.product_id, command.quantity)
        repo.add(cart)

        logger.info(
            "Cart item quantity updated",
            cart_id=str(cart.id),
            product_id=str(command.product_id),
            quantity=command.quantity,
        )
        return cart

    @handle(RemoveCartItem)
    def remove_cart_item(self, command):
        caller = Caller.from_command(command)
        repo = current_domain.repository_for(Cart)
        cart = repo.require_active_for(caller.user_id)

        cart.remove_item(command.product_id)
        repo.add(cart)

        logger.info("Cart item removed", cart_id=str(cart.id), product_id=str(command.product_id))
        return cart

    @handle(UpdateCartItemNotes)
    def update_cart_item_notes(self, command):
        caller = Caller.from_command(command)
        notes = localized_text(_loads(command.notes), "notes") if command.notes else None

        repo = current_domain.repository_for(Cart)
        cart = repo.require_active_for(caller.user_id)

        cart.update_item_notes(command.product_id, notes)
        repo.add(cart)
        return cart
