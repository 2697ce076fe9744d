"""Tests for localized read views and their catalogue lookups."""

from ordering.cart.cart import Cart
from ordering.presenters import Projector


def _lookups(catalog):
    return [call["product_id"] for call in catalog.calls if call["method"] == "lookup"]


class TestDescribe:
    def test_skips_unknown_and_repeated_products(self, catalog):
        found = catalog.describe(["prod-001", "prod-404", "prod-001"])

        assert list(found) == ["prod-001"]
        assert found["prod-001"].price == 10.0
        assert _lookups(catalog) == ["prod-001", "prod-404"]


class TestCartView:
    def test_products_fetched_once_per_projector(self, catalog):
        cart = Cart.create(owner_id="user-1")
        cart.add_item("prod-001", 2, 10.0)
        cart.add_item("prod-404", 1, 5.0)
        projector = Projector("ar", catalog=catalog)

        first = projector.cart(cart)
        projector.cart(cart)

        products = [item["product"] for item in first["items"]]
        assert products[0]["nameText"] == "علبة تمر"
        assert products[1] == {"id": "prod-404"}
        assert _lookups(catalog) == ["prod-001", "prod-404"]
