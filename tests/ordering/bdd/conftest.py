"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.cart.cart import Cart
from ordering.cart.events import (
    CartAbandoned,
    CartCleared,
    CartConverted,
    CartDiscountApplied,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
)
from ordering.order.events import (
    OrderCancelled,
    OrderPlaced,
    OrderStatusChanged,
    OrderUpdated,
    PaymentStatusChanged,
)
from ordering.order.order import Order, ShippingAddress
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

# Map event name strings to classes for dynamic lookup in Then steps
_ORDER_EVENT_CLASSES = {
    "OrderPlaced": OrderPlaced,
    "OrderStatusChanged": OrderStatusChanged,
    "PaymentStatusChanged": PaymentStatusChanged,
    "OrderCancelled": OrderCancelled,
    "OrderUpdated": OrderUpdated,
}

_CART_EVENT_CLASSES = {
    "CartItemAdded": CartItemAdded,
    "CartQuantityUpdated": CartQuantityUpdated,
    "CartItemRemoved": CartItemRemoved,
    "CartDiscountApplied": CartDiscountApplied,
    "CartCleared": CartCleared,
    "CartConverted": CartConverted,
    "CartAbandoned": CartAbandoned,
}


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps: Cart
# ---------------------------------------------------------------------------
@given("an active cart", target_fixture="cart")
def active_cart():
    cart = Cart.create(owner_id="user-1")
    cart._events.clear()
    return cart


@given(
    parsers.cfparse('the cart holds {qty:d} of "{product_id}" at {price:f}'),
    target_fixture="cart",
)
def cart_holding(cart, qty, product_id, price):
    cart.add_item(product_id, qty, price)
    cart._events.clear()
    return cart


@given(parsers.cfparse("a {percent:d}% discount was applied"), target_fixture="cart")
def discounted_cart(cart, percent):
    cart.apply_discount(percent)
    cart._events.clear()
    return cart


@given("the cart is converted", target_fixture="cart")
def converted_cart(cart):
    cart.convert("order-001")
    cart._events.clear()
    return cart


# ---------------------------------------------------------------------------
# Given steps: Order
# ---------------------------------------------------------------------------
@given("a placed order", target_fixture="order")
def placed_order():
    order = Order.place(
        owner_id="user-1",
        items_data=[
            {"product_id": "prod-001", "quantity": 2, "unit_price": 10.0},
            {"product_id": "prod-002", "quantity": 1, "unit_price": 25.5},
        ],
        shipping_address=ShippingAddress(
            address_en="12 King Fahd Road",
            city_en="Riyadh",
            city_ar="الرياض",
            country_en="Saudi Arabia",
            postal_code="12211",
        ),
        payment_method="cash",
    )
    order._events.clear()
    return order


@given(parsers.cfparse('the order was moved to "{status}"'), target_fixture="order")
def moved_order(order, status):
    order.transition_to(status, changed_by="admin-1")
    order._events.clear()
    return order


@given("the order was paid", target_fixture="order")
def paid_order(order):
    order.mark_paid(changed_by="user-1")
    order._events.clear()
    return order


@given("the order was cancelled", target_fixture="order")
def cancelled_order(order):
    order.cancel(cancelled_by="customer")
    order._events.clear()
    return order


# ---------------------------------------------------------------------------
# Then steps: Cart
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the cart status is "{status}"'))
def cart_status_is(cart, status):
    assert cart.status == status


@then("the cart action fails with a validation error")
def cart_action_fails(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse("a {event_type} cart event is raised"))
def cart_event_raised(cart, event_type):
    event_cls = _CART_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in cart._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in cart._events]}"


# ---------------------------------------------------------------------------
# Then steps: Order
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order, status):
    assert order.status == status


@then(parsers.cfparse('the payment status is "{status}"'))
def payment_status_is(order, status):
    assert order.payment_status == status


@then("the order action fails with a validation error")
def order_action_fails(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse("an {event_type} order event is raised"))
def order_event_raised_an(order, event_type):
    assert any(isinstance(e, _ORDER_EVENT_CLASSES[event_type]) for e in order._events)


@then(parsers.cfparse("a {event_type} order event is raised"))
def order_event_raised_a(order, event_type):
    assert any(isinstance(e, _ORDER_EVENT_CLASSES[event_type]) for e in order._events)
