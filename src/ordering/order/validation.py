"""Checks shared by order placement and order edits.

Raw payloads (decoded JSON) are turned into validated values here so that a
handler can check every part of a request before it mutates anything.
"""

from protean.exceptions import ValidationError

from ordering.order.order import ADDRESS_PARTS, PaymentMethod, ShippingAddress
from ordering.shared.localized_text import localized_text
from ordering.shared.money import is_amount


def order_items(raw_items) -> list[dict]:
    """Validate a list of ``{product_id|product, quantity, price|unit_price}``."""
    if not isinstance(raw_items, list) or not raw_items:
        raise ValidationError({"items": ["Order must contain at least one item"]})

    items = []
    for index, raw in enumerate(raw_items):
        if not isinstance(raw, dict):
            raise ValidationError({"items": [f"Item {index + 1} must be an object"]})

        product_id = raw.get("product_id") or raw.get("product")
        if not product_id:
            raise ValidationError({"items": [f"Item {index + 1}: product is required"]})

        quantity = raw.get("quantity")
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise ValidationError({"items": [f"Item {index + 1}: quantity must be at least 1"]})

        unit_price = raw.get("price", raw.get("unit_price"))
        if not is_amount(unit_price) or unit_price < 0:
            raise ValidationError({"items": [f"Item {index + 1}: price must be a non-negative number"]})

        items.append({"product_id": str(product_id), "quantity": quantity, "unit_price": float(unit_price)})
    return items


def shipping_address(raw, current: ShippingAddress | None = None) -> ShippingAddress:
    """Build a ShippingAddress from a payload.

    With ``current`` the payload is a patch: fields it leaves out are kept
    from the current address, fields it supplies are revalidated.
    """
    if not isinstance(raw, dict):
        raise ValidationError({"shipping_address": ["Shipping address must be an object"]})

    values = {}
    for field in ADDRESS_PARTS:
        if field in raw:
            values[field] = localized_text(raw[field], f"shipping_address.{field}", required=True)
        elif current is not None:
            values[field] = getattr(current, field)
        else:
            raise ValidationError({f"shipping_address.{field}": [f"{field} is required in at least one language"]})

    postal_code = raw.get("postal_code", raw.get("postalCode"))
    if postal_code is None and current is not None:
        postal_code = current.postal_code
    if not isinstance(postal_code, str) or not postal_code.strip():
        raise ValidationError({"shipping_address.postal_code": ["Postal code is required"]})

    return ShippingAddress.from_parts(
        address=values["address"],
        city=values["city"],
        country=values["country"],
        postal_code=postal_code.strip(),
    )


def payment_method(value) -> str:
    allowed = [member.value for member in PaymentMethod]
    if value not in allowed:
        raise ValidationError({"payment_method": [f"Payment method must be one of: {', '.join(allowed)}"]})
    return value
