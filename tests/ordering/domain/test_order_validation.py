"""Tests for order payload validation."""

import pytest
from ordering.order import validation
from protean.exceptions import ValidationError


class TestOrderItems:
    def test_accepts_product_alias_and_price(self):
        items = validation.order_items([{"product": "prod-001", "quantity": 2, "price": 10}])
        assert items == [{"product_id": "prod-001", "quantity": 2, "unit_price": 10.0}]

    def test_accepts_unit_price(self):
        items = validation.order_items([{"product_id": "prod-001", "quantity": 1, "unit_price": 4.5}])
        assert items[0]["unit_price"] == 4.5

    def test_free_item_allowed(self):
        items = validation.order_items([{"product_id": "gift-1", "quantity": 1, "price": 0}])
        assert items[0]["unit_price"] == 0.0

    @pytest.mark.parametrize("raw", [None, [], "prod-001", {"product_id": "prod-001"}])
    def test_needs_a_list_of_items(self, raw):
        with pytest.raises(ValidationError):
            validation.order_items(raw)

    @pytest.mark.parametrize(
        "item",
        [
            {"quantity": 1, "price": 10.0},
            {"product_id": "prod-001", "quantity": 0, "price": 10.0},
            {"product_id": "prod-001", "quantity": "2", "price": 10.0},
            {"product_id": "prod-001", "quantity": 1, "price": -1},
            {"product_id": "prod-001", "quantity": 1, "price": float("nan")},
            {"product_id": "prod-001", "quantity": 1, "price": float("inf")},
            {"product_id": "prod-001", "quantity": 1},
        ],
    )
    def test_invalid_item(self, item):
        with pytest.raises(ValidationError):
            validation.order_items([item])


class TestShippingAddress:
    def test_full_address(self, address_payload):
        address = validation.shipping_address(address_payload)
        assert address.city.ar == "الرياض"
        assert address.postal_code == "12211"

    def test_camel_case_postal_code(self, address_payload):
        address_payload["postalCode"] = address_payload.pop("postal_code")
        assert validation.shipping_address(address_payload).postal_code == "12211"

    def test_missing_city_rejected(self, address_payload):
        del address_payload["city"]
        with pytest.raises(ValidationError) as exc:
            validation.shipping_address(address_payload)
        assert "shipping_address.city" in exc.value.messages

    def test_blank_country_rejected(self, address_payload):
        address_payload["country"] = {"en": " ", "ar": ""}
        with pytest.raises(ValidationError):
            validation.shipping_address(address_payload)

    def test_missing_postal_code_rejected(self, address_payload):
        del address_payload["postal_code"]
        with pytest.raises(ValidationError):
            validation.shipping_address(address_payload)

    def test_patch_keeps_unsupplied_fields(self, address_payload):
        current = validation.shipping_address(address_payload)
        patched = validation.shipping_address({"city": {"en": "Jeddah"}}, current=current)
        assert patched.city.en == "Jeddah"
        assert patched.city.ar is None
        assert patched.address.en == "12 King Fahd Road"
        assert patched.postal_code == "12211"

    def test_not_an_object(self):
        with pytest.raises(ValidationError):
            validation.shipping_address("Riyadh")


class TestPaymentMethod:
    @pytest.mark.parametrize("method", ["cash", "credit_card", "bank_transfer"])
    def test_allowed(self, method):
        assert validation.payment_method(method) == method

    def test_unknown(self):
        with pytest.raises(ValidationError):
            validation.payment_method("crypto")
