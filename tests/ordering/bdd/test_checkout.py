"""BDD tests for checking a cart out into an order."""

import json

from ordering.cart.cart import Cart, CartStatus
from ordering.cart.items import AddItemsToCart
from ordering.cart.management import ApplyCartDiscount
from ordering.checkout.checkout import CheckoutCart
from ordering.errors import InsufficientStock
from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/checkout.feature")


def _add_items(caller_id, product_id, qty):
    return current_domain.process(
        AddItemsToCart(caller_id=caller_id, items=json.dumps([{"product_id": product_id, "quantity": qty}])),
        asynchronous=False,
    )


@given(
    parsers.cfparse('customer "{caller_id}" has {qty:d} of "{product_id}" in their cart'),
    target_fixture="cart",
)
def customer_with_cart(caller_id, qty, product_id):
    return _add_items(caller_id, product_id, qty)


@given(parsers.cfparse("the customer applied a {percent:d}% discount"))
def customer_discount(cart, percent):
    current_domain.process(ApplyCartDiscount(caller_id=cart.owner_id, discount=percent), asynchronous=False)


@when(parsers.cfparse('the customer checks out paying by "{method}"'), target_fixture="order")
def checkout(cart, method, address_json):
    return current_domain.process(
        CheckoutCart(caller_id=cart.owner_id, shipping_address=address_json, payment_method=method),
        asynchronous=False,
    )


@when(parsers.cfparse('the customer adds {qty:d} of "{product_id}"'))
def customer_adds(cart, qty, product_id, error):
    try:
        _add_items(cart.owner_id, product_id, qty)
    except InsufficientStock as exc:
        error["exc"] = exc


@then(parsers.cfparse("an order totalling {total:f} is placed"))
def order_totalling(order, total):
    assert order.total_order_price == total


@then("the previous cart is converted")
def previous_cart_converted(cart, order):
    stored = current_domain.repository_for(Cart).get(cart.id)
    assert stored.status == CartStatus.CONVERTED.value
    assert str(stored.converted_order_id) == str(order.id)


@then("the customer has a fresh empty cart")
def fresh_cart(cart):
    fresh = current_domain.repository_for(Cart).active_for(cart.owner_id)
    assert fresh is not None
    assert str(fresh.id) != str(cart.id)
    assert fresh.items == []


@then("the request fails with insufficient stock")
def insufficient_stock(error):
    assert isinstance(error["exc"], InsufficientStock)
    assert error["exc"].available == 10


@then(parsers.cfparse('the cart still holds {qty:d} of "{product_id}"'))
def cart_still_holds(cart, qty, product_id):
    stored = current_domain.repository_for(Cart).get(cart.id)
    assert stored.item_for(product_id).quantity == qty
