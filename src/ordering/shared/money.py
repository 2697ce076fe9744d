"""Money arithmetic for carts and orders.

Amounts are stored as floats on the aggregates; every computation goes through
``Decimal`` and is rounded half-up to cents so totals never drift.
"""

import math
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def is_amount(value) -> bool:
    """True for a finite int or float; NaN, infinities and bools are not amounts."""
    return isinstance(value, int | float) and not isinstance(value, bool) and math.isfinite(value)


def to_decimal(amount) -> Decimal:
    if isinstance(amount, Decimal):
        return amount
    # str() keeps 10.1 as 10.1 instead of its binary expansion
    return Decimal(str(amount))


def round_money(amount) -> float:
    """Round an amount to cents and return it as a float."""
    return float(to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP))


def line_total(unit_price, quantity: int) -> float:
    return round_money(to_decimal(unit_price) * quantity)


def items_total(items: Iterable) -> float:
    """Sum ``unit_price * quantity`` over cart or order items.

    Items may be entities or dicts with ``unit_price`` and ``quantity`` keys.
    """
    total = Decimal("0")
    for item in items:
        if isinstance(item, dict):
            unit_price, quantity = item["unit_price"], item["quantity"]
        else:
            unit_price, quantity = item.unit_price, item.quantity
        total += to_decimal(unit_price) * quantity
    return round_money(total)


def apply_discount(total, percent) -> float:
    """Return ``total`` reduced by ``percent`` (0-100)."""
    percent = to_decimal(percent or 0)
    if not percent.is_finite() or percent < 0 or percent > 100:
        raise ValueError(f"Discount percent out of range: {percent}")
    return round_money(to_decimal(total) * (Decimal("100") - percent) / Decimal("100"))


def amounts_match(left, right) -> bool:
    return round_money(left) == round_money(right)


def discounted_unit_price(unit_price, percent) -> float:
    """``unit_price`` reduced by ``percent``, left unrounded.

    Order totals round once over the whole sum, so lines priced this way add up
    to the same figure as ``apply_discount`` on the undiscounted total.
    """
    percent = to_decimal(percent or 0)
    if not percent.is_finite() or percent < 0 or percent > 100:
        raise ValueError(f"Discount percent out of range: {percent}")
    return float(to_decimal(unit_price) * (Decimal("100") - percent) / Decimal("100"))
