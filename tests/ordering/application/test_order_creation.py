"""Application tests for direct order placement."""

import json

import pytest
from ordering.order.creation import PlaceOrder
from ordering.order.order import Order
from protean import current_domain
from protean.exceptions import ValidationError

ITEMS = [
    {"product_id": "prod-001", "quantity": 2, "price": 10.0},
    {"product": "prod-002", "quantity": 1, "price": 25.5},
]


def _place(address_json, **overrides):
    fields = {
        "caller_id": "user-1",
        "items": json.dumps(ITEMS),
        "shipping_address": address_json,
        "payment_method": "cash",
    }
    fields.update(overrides)
    return current_domain.process(PlaceOrder(**fields), asynchronous=False)


class TestPlaceOrderCommand:
    def test_order_persists(self, address_json):
        order = _place(address_json)
        stored = current_domain.repository_for(Order).get(order.id)
        assert stored.owner_id == "user-1"
        assert len(stored.items) == 2
        assert stored.total_order_price == 45.5
        assert stored.shipping_address.city.ar == "الرياض"
        assert stored.status == "pending"
        assert stored.payment_status == "pending"

    def test_client_total_is_ignored(self, address_json):
        order = _place(address_json, total_order_price=1.0)
        assert order.total_order_price == 45.5

    def test_non_finite_client_total_is_ignored(self, address_json):
        order = _place(address_json, total_order_price=float("nan"))
        assert order.total_order_price == 45.5

    def test_notes(self, address_json):
        order = _place(address_json, notes=json.dumps({"en": "Leave with the doorman"}))
        assert order.notes.en == "Leave with the doorman"

    def test_unknown_payment_method(self, address_json):
        with pytest.raises(ValidationError):
            _place(address_json, payment_method="cheque")

    def test_missing_items(self, address_json):
        with pytest.raises(ValidationError):
            _place(address_json, items=json.dumps([]))

    def test_address_needs_every_part(self, address_payload):
        del address_payload["country"]
        with pytest.raises(ValidationError):
            _place(json.dumps(address_payload))

    def test_nothing_persisted_on_failure(self, address_json):
        with pytest.raises(ValidationError):
            _place(address_json, items=json.dumps([{"product_id": "prod-001", "quantity": -1, "price": 10.0}]))
        assert current_domain.repository_for(Order).owned_by("user-1") == []
