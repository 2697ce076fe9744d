"""Localized read views of carts and orders.

Each view carries the raw bilingual values next to a single display string
resolved for the requested language (``statusText``, ``notesText`` and so on),
plus product and customer projections fetched from the collaborators.
"""

from datetime import datetime

from ordering.access import get_identity_provider
from ordering.catalogue import get_catalog
from ordering.shared.localization import (
    CART_STATUS_TEXT,
    ORDER_STATUS_TEXT,
    PAYMENT_METHOD_TEXT,
    PAYMENT_STATUS_TEXT,
    discount_text,
    display,
    pick,
)
from ordering.shared.localized_text import LocalizedText


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _raw(text: LocalizedText | None) -> dict | None:
    return text.as_payload() if text is not None else None


class Projector:
    """Renders carts and orders in one language.

    Product and customer lookups are cached for the lifetime of the projector,
    so rendering a list hits each collaborator once per id.
    """

    def __init__(self, lang: str, catalog=None, identity=None):
        self.lang = lang
        self.catalog = catalog or get_catalog()
        self.identity = identity or get_identity_provider()
        self._products: dict = {}
        self._customers: dict = {}

    # -------------------------------------------------------------------
    # Projections
    # -------------------------------------------------------------------
    def _prefetch_products(self, product_ids) -> None:
        missing = [str(pid) for pid in product_ids if str(pid) not in self._products]
        if not missing:
            return
        found = self.catalog.describe(missing)
        for product_id in missing:
            self._products[product_id] = found.get(product_id)

    def product(self, product_id) -> dict:
        product_id = str(product_id)
        if product_id not in self._products:
            self._products[product_id] = self.catalog.lookup(product_id)
        snapshot = self._products[product_id]
        if snapshot is None:
            return {"id": product_id}
        return {
            "id": snapshot.product_id,
            "name": snapshot.name,
            "nameText": pick(snapshot.name, self.lang),
            "price": snapshot.price,
            "image": snapshot.image,
        }

    def customer(self, user_id) -> dict:
        user_id = str(user_id)
        if user_id not in self._customers:
            self._customers[user_id] = self.identity.profile(user_id)
        profile = self._customers[user_id]
        if profile is None:
            return {"id": user_id}
        return {
            "id": profile.user_id,
            "firstName": profile.first_name,
            "lastName": profile.last_name,
            "email": profile.email,
            "phoneNumber": profile.phone_number,
            "profilePicture": profile.profile_picture,
        }

    # -------------------------------------------------------------------
    # Carts
    # -------------------------------------------------------------------
    def cart(self, cart) -> dict:
        self._prefetch_products(item.product_id for item in cart.items)
        return {
            "id": str(cart.id),
            "user": self.customer(cart.owner_id),
            "items": [
                {
                    "product": self.product(item.product_id),
                    "quantity": item.quantity,
                    "price": item.unit_price,
                    "subtotal": item.subtotal,
                    "notes": _raw(item.notes),
                    "notesText": pick(item.notes, self.lang),
                }
                for item in cart.items
            ],
            "totalQuantity": cart.total_quantity,
            "totalPrice": cart.total_price,
            "discount": cart.discount,
            "discountDescription": _raw(cart.discount_description),
            "discountText": discount_text(cart.discount, cart.discount_description, self.lang),
            "totalPriceAfterDiscount": cart.total_price_after_discount,
            "notes": _raw(cart.notes),
            "notesText": pick(cart.notes, self.lang),
            "status": cart.status,
            "statusText": display(CART_STATUS_TEXT, cart.status, self.lang),
            "convertedOrderId": str(cart.converted_order_id) if cart.converted_order_id else None,
            "createdAt": _iso(cart.created_at),
            "updatedAt": _iso(cart.updated_at),
        }

    # -------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------
    def shipping_address(self, address) -> tuple[dict | None, dict | None]:
        if address is None:
            return None, None
        raw = {
            "address": _raw(address.address),
            "city": _raw(address.city),
            "country": _raw(address.country),
            "postalCode": address.postal_code,
        }
        text = {
            "address": pick(address.address, self.lang),
            "city": pick(address.city, self.lang),
            "country": pick(address.country, self.lang),
            "postalCode": address.postal_code,
        }
        return raw, text

    def order(self, order) -> dict:
        self._prefetch_products(item.product_id for item in order.items)
        address, address_text = self.shipping_address(order.shipping_address)
        return {
            "id": str(order.id),
            "user": self.customer(order.owner_id),
            "items": [
                {
                    "product": self.product(item.product_id),
                    "quantity": item.quantity,
                    "price": item.unit_price,
                    "subtotal": item.subtotal,
                }
                for item in order.items
            ],
            "totalItems": order.total_items,
            "totalOrderPrice": order.total_order_price,
            "shippingAddress": address,
            "shippingAddressText": address_text,
            "status": order.status,
            "statusText": display(ORDER_STATUS_TEXT, order.status, self.lang),
            "paymentMethod": order.payment_method,
            "paymentMethodText": display(PAYMENT_METHOD_TEXT, order.payment_method, self.lang),
            "paymentStatus": order.payment_status,
            "paymentStatusText": display(PAYMENT_STATUS_TEXT, order.payment_status, self.lang),
            "notes": _raw(order.notes),
            "notesText": pick(order.notes, self.lang),
            "isActive": order.is_active,
            "cartId": str(order.cart_id) if order.cart_id else None,
            "cancelledBy": order.cancelled_by,
            "paidAt": _iso(order.paid_at),
            "createdAt": _iso(order.created_at),
            "updatedAt": _iso(order.updated_at),
        }
