"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A customer placed an order."""

    __version__ = 1

    order_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    cart_id = Identifier()
    item_count = Integer(required=True)
    total_order_price = Float(required=True)
    payment_method = String(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """The fulfilment status of an order moved forward."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_by = Identifier()


@ordering.event(part_of="Order")
class PaymentStatusChanged:
    """The payment status of an order changed."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_payment_status = String(required=True)
    new_payment_status = String(required=True)
    status = String(required=True)
    changed_by = Identifier()


@ordering.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled before shipping."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    cancelled_by = String(required=True)
    cancelled_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderUpdated:
    """Order details (items, address, payment method or notes) were edited."""

    __version__ = 1

    order_id = Identifier(required=True)
    changed_fields = String(required=True, max_length=500)  # Comma separated
    total_order_price = Float(required=True)
    changed_by = Identifier()


@ordering.event(part_of="Order")
class OrderDeactivated:
    """An admin soft-deleted the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    deactivated_by = Identifier(required=True)
