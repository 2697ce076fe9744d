"""Application tests for opening carts, cart notes, discounts and clearing."""

import json

import pytest
from ordering.cart.cart import Cart, CartStatus
from ordering.cart.items import AddItemsToCart
from ordering.cart.management import ApplyCartDiscount, ClearCart, OpenCart, UpdateCartNotes
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _open(caller_id="user-1"):
    return current_domain.process(OpenCart(caller_id=caller_id), asynchronous=False)


def _fill(caller_id="user-1"):
    return current_domain.process(
        AddItemsToCart(
            caller_id=caller_id,
            items=json.dumps([{"product_id": "prod-001", "quantity": 2}, {"product_id": "prod-002", "quantity": 4}]),
        ),
        asynchronous=False,
    )


class TestOpenCart:
    def test_creates_empty_active_cart(self):
        cart = _open()
        assert cart.status == CartStatus.ACTIVE.value
        assert cart.items == []
        assert current_domain.repository_for(Cart).get(cart.id).owner_id == "user-1"

    def test_returns_existing_cart(self):
        first = _open()
        second = _open()
        assert str(first.id) == str(second.id)
        assert len(current_domain.repository_for(Cart).owned_by("user-1")) == 1

    def test_reactivates_abandoned_cart(self):
        cart = _fill()
        repo = current_domain.repository_for(Cart)
        stored = repo.get(cart.id)
        stored.abandon()
        repo.add(stored)

        reopened = _open()
        assert str(reopened.id) == str(cart.id)
        assert reopened.status == CartStatus.ACTIVE.value
        assert len(reopened.items) == 2


class TestCartNotes:
    def test_set_and_clear(self):
        _open()
        cart = current_domain.process(
            UpdateCartNotes(caller_id="user-1", notes=json.dumps({"ar": "اتصل قبل التوصيل"}, ensure_ascii=False)),
            asynchronous=False,
        )
        assert cart.notes.ar == "اتصل قبل التوصيل"

        cart = current_domain.process(UpdateCartNotes(caller_id="user-1"), asynchronous=False)
        assert cart.notes is None

    def test_blank_notes_rejected(self):
        _open()
        with pytest.raises(ValidationError):
            current_domain.process(
                UpdateCartNotes(caller_id="user-1", notes=json.dumps({"en": "  "})),
                asynchronous=False,
            )

    def test_needs_a_cart(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(UpdateCartNotes(caller_id="user-1"), asynchronous=False)


class TestApplyDiscount:
    def test_discount_persists(self):
        _fill()
        current_domain.process(
            ApplyCartDiscount(
                caller_id="user-1",
                discount=10,
                description=json.dumps({"en": "Eid sale", "ar": "تخفيضات العيد"}, ensure_ascii=False),
            ),
            asynchronous=False,
        )
        cart = current_domain.repository_for(Cart).active_for("user-1")
        assert cart.discount == 10.0
        assert cart.total_price == 122.0
        assert cart.total_price_after_discount == 109.8
        assert cart.discount_description.ar == "تخفيضات العيد"

    def test_out_of_range_rejected(self):
        _fill()
        with pytest.raises(ValidationError):
            current_domain.process(ApplyCartDiscount(caller_id="user-1", discount=120), asynchronous=False)
        assert current_domain.repository_for(Cart).active_for("user-1").discount == 0.0

    def test_needs_a_cart(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(ApplyCartDiscount(caller_id="user-1", discount=5), asynchronous=False)


class TestClearCart:
    def test_clear_persists(self):
        _fill()
        current_domain.process(ApplyCartDiscount(caller_id="user-1", discount=10), asynchronous=False)
        current_domain.process(ClearCart(caller_id="user-1"), asynchronous=False)

        cart = current_domain.repository_for(Cart).active_for("user-1")
        assert cart.items == []
        assert cart.total_price == 0.0
        assert cart.discount == 0.0
