"""Domain events for the Cart aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Cart")
class CartItemAdded:
    """A product was added to the cart, or its quantity increased."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    unit_price = Float(required=True)
    total_price = Float(required=True)


@ordering.event(part_of="Cart")
class CartQuantityUpdated:
    """The quantity of a cart item was overwritten."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    total_price = Float(required=True)


@ordering.event(part_of="Cart")
class CartItemRemoved:
    """An item was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    total_price = Float(required=True)


@ordering.event(part_of="Cart")
class CartDiscountApplied:
    """A percentage discount was set on the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    discount = Float(required=True)
    total_price_after_discount = Float(required=True)


@ordering.event(part_of="Cart")
class CartCleared:
    """All items, discount and notes were removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    items_removed = Integer(required=True)


@ordering.event(part_of="Cart")
class CartConverted:
    """The cart was turned into an order at checkout."""

    __version__ = 1

    cart_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    order_id = Identifier(required=True)
    converted_at = DateTime(required=True)


@ordering.event(part_of="Cart")
class CartAbandoned:
    """The cart was marked abandoned."""

    __version__ = 1

    cart_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    abandoned_at = DateTime(required=True)


@ordering.event(part_of="Cart")
class CartReactivated:
    """An abandoned cart was made active again."""

    __version__ = 1

    cart_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    previous_status = String(required=True)
