"""Cart aggregate: one active cart per customer, priced from captured unit prices.

The cart is a standard aggregate (not event sourced). Its ``total_price`` is
stored for querying but is recomputed from the items by ``_recalculate_totals``
after every mutation, and an invariant rejects any state where the two differ.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from ordering.cart.events import (
    CartAbandoned,
    CartCleared,
    CartConverted,
    CartDiscountApplied,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
    CartReactivated,
)
from ordering.domain import ordering
from ordering.shared.localized_text import LocalizedText
from ordering.shared.money import amounts_match, apply_discount, is_amount, items_total, line_total


class CartStatus(Enum):
    ACTIVE = "active"
    ABANDONED = "abandoned"
    CONVERTED = "converted"


@ordering.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    notes = ValueObject(LocalizedText)
    added_at = DateTime()

    @property
    def subtotal(self) -> float:
        return line_total(self.unit_price, self.quantity)


@ordering.aggregate
class Cart:
    owner_id = Identifier(required=True)
    items = HasMany(CartItem)
    total_price = Float(default=0.0, min_value=0.0)
    discount = Float(default=0.0, min_value=0.0, max_value=100.0)
    discount_description = ValueObject(LocalizedText)
    notes = ValueObject(LocalizedText)
    status = String(choices=CartStatus, default=CartStatus.ACTIVE.value)
    converted_order_id = Identifier()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_price_must_match_items(self):
        if not amounts_match(self.total_price or 0.0, items_total(self.items)):
            raise ValidationError({"total_price": ["Cart total does not match its items"]})

    @invariant.post
    def one_item_per_product(self):
        product_ids = [str(item.product_id) for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"items": ["A product can appear only once in a cart"]})

    @invariant.post
    def cart_must_have_items_to_convert(self):
        if self.status == CartStatus.CONVERTED.value and not self.items:
            raise ValidationError({"cart": ["Cannot convert an empty cart to an order"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, owner_id):
        now = datetime.now(UTC)
        return cls(
            owner_id=owner_id,
            status=CartStatus.ACTIVE.value,
            total_price=0.0,
            discount=0.0,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------
    @property
    def total_price_after_discount(self) -> float:
        return apply_discount(self.total_price or 0.0, self.discount or 0.0)

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)

    def item_for(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _assert_active(self, action):
        if self.status != CartStatus.ACTIVE.value:
            raise ValidationError({"status": [f"Cannot {action}: cart is {self.status}"]})

    def _require_item(self, product_id):
        item = self.item_for(product_id)
        if item is None:
            raise ObjectNotFoundError({"item": [f"Product {product_id} is not in the cart"]})
        return item

    def _recalculate_totals(self):
        self.total_price = items_total(self.items)

    def _touch(self):
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_line_items(self, entries, notes=None):
        """Add several products at once.

        ``entries`` is a list of dicts with ``product_id``, ``quantity``,
        ``unit_price`` and an optional ``notes`` LocalizedText. Every entry is
        checked before any is applied. A product already in the cart has its
        quantity increased and, when notes are given, its notes replaced.
        ``notes`` replaces the cart-level notes when given.
        """
        self._assert_active("add items")
        if not entries:
            raise ValidationError({"items": ["At least one item is required"]})

        for entry in entries:
            if not entry.get("product_id"):
                raise ValidationError({"product": ["Product is required"]})
            quantity = entry.get("quantity")
            if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
                raise ValidationError({"quantity": ["Quantity must be at least 1"]})
            unit_price = entry.get("unit_price")
            if not is_amount(unit_price) or unit_price <= 0:
                raise ValidationError({"price": ["Price must be greater than 0"]})

        now = datetime.now(UTC)
        added = []
        with atomic_change(self):
            for entry in entries:
                existing = self.item_for(entry["product_id"])
                if existing:
                    existing.quantity += entry["quantity"]
                    if entry.get("notes") is not None:
                        existing.notes = entry["notes"]
                    item = existing
                else:
                    item = CartItem(
                        product_id=entry["product_id"],
                        quantity=entry["quantity"],
                        unit_price=float(entry["unit_price"]),
                        notes=entry.get("notes"),
                        added_at=now,
                    )
                    self.add_items(item)
                added.append((item, entry["quantity"]))

            if notes is not None:
                self.notes = notes
            self._recalculate_totals()
            self.updated_at = now

        for item, quantity in added:
            self.raise_(
                CartItemAdded(
                    cart_id=str(self.id),
                    product_id=str(item.product_id),
                    quantity=quantity,
                    new_quantity=item.quantity,
                    unit_price=item.unit_price,
                    total_price=self.total_price,
                )
            )

    def add_item(self, product_id, quantity, unit_price, notes=None):
        self.add_line_items([{"product_id": product_id, "quantity": quantity, "unit_price": unit_price, "notes": notes}])

    def update_item_quantity(self, product_id, quantity):
        """Overwrite the quantity of a product already in the cart."""
        self._assert_active("update quantities")
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        item = self._require_item(product_id)
        previous_quantity = item.quantity

        with atomic_change(self):
            item.quantity = quantity
            self._recalculate_totals()
            self._touch()

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
                total_price=self.total_price,
            )
        )

    def remove_item(self, product_id):
        self._assert_active("remove items")
        item = self._require_item(product_id)

        with atomic_change(self):
            self.remove_items(item)
            self._recalculate_totals()
            self._touch()

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                product_id=str(product_id),
                total_price=self.total_price,
            )
        )

    def update_item_notes(self, product_id, notes):
        """Replace an item's notes; ``None`` clears them."""
        item = self._require_item(product_id)
        with atomic_change(self):
            item.notes = notes
            self._touch()

    def update_notes(self, notes):
        """Replace the cart-level notes; ``None`` clears them."""
        self.notes = notes
        self._touch()

    # -------------------------------------------------------------------
    # Discount
    # -------------------------------------------------------------------
    def apply_discount(self, percent, description=None):
        """Set the discount percentage, replacing the description when one is given."""
        if self.status == CartStatus.CONVERTED.value:
            raise ValidationError({"status": ["Cannot discount a converted cart"]})
        if not is_amount(percent):
            raise ValidationError({"discount": ["Discount must be a number"]})
        if percent < 0 or percent > 100:
            raise ValidationError({"discount": ["Discount must be between 0 and 100"]})

        with atomic_change(self):
            self.discount = float(percent)
            if description is not None:
                self.discount_description = description
            self._touch()

        self.raise_(
            CartDiscountApplied(
                cart_id=str(self.id),
                discount=self.discount,
                total_price_after_discount=self.total_price_after_discount,
            )
        )

    def clear(self):
        """Empty the cart and reset discount and notes."""
        self._assert_active("clear the cart")
        items_removed = len(self.items)

        with atomic_change(self):
            for item in list(self.items):
                self.remove_items(item)
            self.discount = 0.0
            self.discount_description = None
            self.notes = None
            self._recalculate_totals()
            self._touch()

        self.raise_(CartCleared(cart_id=str(self.id), items_removed=items_removed))

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def convert(self, order_id):
        """Mark the cart as turned into ``order_id``."""
        self._assert_active("convert")
        if not self.items:
            raise ValidationError({"cart": ["Cannot convert an empty cart to an order"]})

        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = CartStatus.CONVERTED.value
            self.converted_order_id = order_id
            self.updated_at = now

        self.raise_(
            CartConverted(
                cart_id=str(self.id),
                owner_id=str(self.owner_id),
                order_id=str(order_id),
                converted_at=now,
            )
        )

    def abandon(self):
        self._assert_active("abandon")
        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = CartStatus.ABANDONED.value
            self.updated_at = now

        self.raise_(
            CartAbandoned(
                cart_id=str(self.id),
                owner_id=str(self.owner_id),
                abandoned_at=now,
            )
        )

    def reactivate(self):
        if self.status != CartStatus.ABANDONED.value:
            raise ValidationError({"status": ["Only abandoned carts can be reactivated"]})

        with atomic_change(self):
            self.status = CartStatus.ACTIVE.value
            self._touch()

        self.raise_(
            CartReactivated(
                cart_id=str(self.id),
                owner_id=str(self.owner_id),
                previous_status=CartStatus.ABANDONED.value,
            )
        )
