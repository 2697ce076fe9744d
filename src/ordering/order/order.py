"""Order aggregate: the core of the ordering domain.

Orders are standard aggregates persisted as current state. The line items and
therefore ``total_order_price`` are fixed at placement; only an explicit item
replacement recomputes them.

Status machine (forward only, an admin may skip intermediate states):
    PENDING → PROCESSING → SHIPPED → DELIVERED
    PENDING/PROCESSING → CANCELLED (only while unpaid)
    DELIVERED and CANCELLED are terminal.

Payment machine:
    PENDING → PAID | FAILED,  FAILED → PENDING | PAID (retry),  PAID → REFUNDED

Paying an order that is still PENDING moves it to PROCESSING. Nothing ever
moves the status back.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from ordering.domain import ordering
from ordering.order.events import (
    OrderCancelled,
    OrderDeactivated,
    OrderPlaced,
    OrderStatusChanged,
    OrderUpdated,
    PaymentStatusChanged,
)
from ordering.shared.localized_text import LANGUAGES, LocalizedText
from ordering.shared.money import amounts_match, items_total, line_total


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(Enum):
    CASH = "cash"
    CREDIT_CARD = "credit_card"
    BANK_TRANSFER = "bank_transfer"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {
        OrderStatus.PROCESSING,
        OrderStatus.SHIPPED,
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

_PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.FAILED},
    PaymentStatus.FAILED: {PaymentStatus.PENDING, PaymentStatus.PAID},
    PaymentStatus.PAID: {PaymentStatus.REFUNDED},
    PaymentStatus.REFUNDED: set(),  # Terminal
}

# States from which cancellation is allowed
_CANCELLABLE_STATES = {OrderStatus.PENDING, OrderStatus.PROCESSING}

ADDRESS_PARTS = ("address", "city", "country")

# States in which a customer can no longer edit the order
CUSTOMER_LOCKED_STATES = {OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED}


def _enum_value(enum_cls, value, field):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError({field: [f"Invalid {field} '{value}'. Allowed: {allowed}"]}) from None


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class ShippingAddress:
    """Where the order goes. Each place name is bilingual; the postal code is plain text.

    The names are stored one column per language and read back as
    ``LocalizedText`` through the ``address``, ``city`` and ``country`` properties.
    """

    address_en = String(max_length=500)
    address_ar = String(max_length=500)
    city_en = String(max_length=100)
    city_ar = String(max_length=100)
    country_en = String(max_length=100)
    country_ar = String(max_length=100)
    postal_code = String(required=True, max_length=20)

    @invariant.post
    def every_place_needs_a_language(self):
        for part in ADDRESS_PARTS:
            if not any((getattr(self, f"{part}_{lang}") or "").strip() for lang in LANGUAGES):
                raise ValidationError({part: [f"{part} is required in at least one language"]})

    @invariant.post
    def postal_code_cannot_be_blank(self):
        if not (self.postal_code or "").strip():
            raise ValidationError({"postal_code": ["Postal code is required"]})

    @classmethod
    def from_parts(cls, address: LocalizedText, city: LocalizedText, country: LocalizedText, postal_code: str):
        values = {"postal_code": postal_code}
        for part, text in (("address", address), ("city", city), ("country", country)):
            for lang in LANGUAGES:
                values[f"{part}_{lang}"] = text.in_language(lang)
        return cls(**values)

    def _part(self, part) -> LocalizedText:
        return LocalizedText(**{lang: getattr(self, f"{part}_{lang}") for lang in LANGUAGES})

    @property
    def address(self) -> LocalizedText:
        return self._part("address")

    @property
    def city(self) -> LocalizedText:
        return self._part("city")

    @property
    def country(self) -> LocalizedText:
        return self._part("country")


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A product, quantity and the unit price captured when the order was placed."""

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)

    @property
    def subtotal(self) -> float:
        return line_total(self.unit_price, self.quantity)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    owner_id = Identifier(required=True)
    items = HasMany(OrderItem)
    total_order_price = Float(default=0.0, min_value=0.0)
    shipping_address = ValueObject(ShippingAddress, required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_method = String(choices=PaymentMethod, required=True)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    notes = ValueObject(LocalizedText)
    is_active = Boolean(default=True)
    cart_id = Identifier()
    cancelled_by = String(max_length=50)
    paid_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_match_items(self):
        if not amounts_match(self.total_order_price or 0.0, items_total(self.items)):
            raise ValidationError({"total_order_price": ["Order total does not match its items"]})

    @invariant.post
    def order_must_have_items(self):
        if not self.items:
            raise ValidationError({"items": ["An order needs at least one item"]})

    @invariant.post
    def paid_order_cannot_be_pending(self):
        if self.payment_status == PaymentStatus.PAID.value and self.status == OrderStatus.PENDING.value:
            raise ValidationError({"status": ["A paid order cannot remain pending"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, owner_id, items_data, shipping_address, payment_method, notes=None, cart_id=None):
        """Place a new order.

        Args:
            owner_id: The customer placing the order.
            items_data: List of dicts with product_id, quantity, unit_price.
            shipping_address: A ShippingAddress value object.
            payment_method: One of the PaymentMethod values.
            notes: Optional LocalizedText.
            cart_id: The cart the order was checked out from, if any.
        """
        _enum_value(PaymentMethod, payment_method, "payment_method")
        now = datetime.now(UTC)

        items = [
            OrderItem(
                product_id=item["product_id"],
                quantity=item["quantity"],
                unit_price=float(item["unit_price"]),
            )
            for item in items_data
        ]
        order = cls(
            owner_id=owner_id,
            items=items,
            total_order_price=items_total(items_data),
            shipping_address=shipping_address,
            status=OrderStatus.PENDING.value,
            payment_method=payment_method,
            payment_status=PaymentStatus.PENDING.value,
            notes=notes,
            is_active=True,
            cart_id=cart_id,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                owner_id=str(owner_id),
                cart_id=str(cart_id) if cart_id else None,
                item_count=len(items),
                total_order_price=order.total_order_price,
                payment_method=payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------
    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def is_locked_for_customer(self) -> bool:
        return OrderStatus(self.status) in CUSTOMER_LOCKED_STATES

    # -------------------------------------------------------------------
    # Transition checks (raise, never mutate)
    # -------------------------------------------------------------------
    def check_status_change(self, new_status):
        """Validate that the current state allows a move to ``new_status``."""
        target = _enum_value(OrderStatus, new_status, "status")
        current = OrderStatus(self.status)
        if target not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target.value}"]})
        if target == OrderStatus.CANCELLED:
            self._check_cancellable()
        return target

    def check_payment_change(self, new_payment_status):
        target = _enum_value(PaymentStatus, new_payment_status, "payment_status")
        current = PaymentStatus(self.payment_status)
        if target not in _PAYMENT_TRANSITIONS.get(current, set()):
            raise ValidationError(
                {"payment_status": [f"Cannot change payment from {current.value} to {target.value}"]}
            )
        if target == PaymentStatus.PAID and self.status == OrderStatus.CANCELLED.value:
            raise ValidationError({"payment_status": ["A cancelled order cannot be paid"]})
        return target

    def _check_cancellable(self):
        current = OrderStatus(self.status)
        if current not in _CANCELLABLE_STATES:
            raise ValidationError({"status": [f"Order cannot be cancelled when it is {current.value}"]})
        if self.payment_status == PaymentStatus.PAID.value:
            raise ValidationError({"status": ["A paid order cannot be cancelled; refund it first"]})

    # -------------------------------------------------------------------
    # Lifecycle transitions
    # -------------------------------------------------------------------
    def transition_to(self, new_status, changed_by=None):
        """Move the order to ``new_status`` along the status machine."""
        target = self.check_status_change(new_status)
        if target == OrderStatus.CANCELLED:
            self.cancel(cancelled_by="admin")
            return

        previous = self.status
        with atomic_change(self):
            self.status = target.value
            self.updated_at = datetime.now(UTC)

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous,
                new_status=target.value,
                changed_by=str(changed_by) if changed_by else None,
            )
        )

    def change_payment_status(self, new_payment_status, changed_by=None):
        """Move the payment along the payment machine.

        Payment reaching ``paid`` while the order is pending advances the
        order to ``processing`` in the same change.
        """
        target = self.check_payment_change(new_payment_status)
        previous_payment = self.payment_status
        previous_status = self.status
        now = datetime.now(UTC)

        with atomic_change(self):
            self.payment_status = target.value
            if target == PaymentStatus.PAID:
                self.paid_at = now
                if self.status == OrderStatus.PENDING.value:
                    self.status = OrderStatus.PROCESSING.value
            self.updated_at = now

        self.raise_(
            PaymentStatusChanged(
                order_id=str(self.id),
                previous_payment_status=previous_payment,
                new_payment_status=target.value,
                status=self.status,
                changed_by=str(changed_by) if changed_by else None,
            )
        )
        if self.status != previous_status:
            self.raise_(
                OrderStatusChanged(
                    order_id=str(self.id),
                    previous_status=previous_status,
                    new_status=self.status,
                    changed_by=str(changed_by) if changed_by else None,
                )
            )

    def mark_paid(self, changed_by=None):
        if self.payment_status == PaymentStatus.PAID.value:
            raise ValidationError({"payment_status": ["Order is already paid"]})
        self.change_payment_status(PaymentStatus.PAID.value, changed_by=changed_by)

    def cancel(self, cancelled_by):
        """Cancel the order. ``cancelled_by`` is ``customer`` or ``admin``."""
        self._check_cancellable()
        previous = self.status
        now = datetime.now(UTC)

        with atomic_change(self):
            self.status = OrderStatus.CANCELLED.value
            self.cancelled_by = cancelled_by
            self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                previous_status=previous,
                cancelled_by=cancelled_by,
                cancelled_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Edits
    # -------------------------------------------------------------------
    def revise(self, changes: dict, changed_by=None):
        """Apply already-validated edits.

        ``changes`` may hold ``items`` (list of dicts, replaces all items and
        recomputes the total), ``shipping_address`` (ShippingAddress),
        ``payment_method``, ``notes`` (LocalizedText or None to clear) and
        ``is_active``.
        """
        if not changes:
            return

        with atomic_change(self):
            if "items" in changes:
                for item in list(self.items):
                    self.remove_items(item)
                for item in changes["items"]:
                    self.add_items(
                        OrderItem(
                            product_id=item["product_id"],
                            quantity=item["quantity"],
                            unit_price=float(item["unit_price"]),
                        )
                    )
                self.total_order_price = items_total(changes["items"])
            if "shipping_address" in changes:
                self.shipping_address = changes["shipping_address"]
            if "payment_method" in changes:
                self.payment_method = _enum_value(PaymentMethod, changes["payment_method"], "payment_method").value
            if "notes" in changes:
                self.notes = changes["notes"]
            if "is_active" in changes:
                self.is_active = bool(changes["is_active"])
            self.updated_at = datetime.now(UTC)

        self.raise_(
            OrderUpdated(
                order_id=str(self.id),
                changed_fields=",".join(sorted(changes)),
                total_order_price=self.total_order_price,
                changed_by=str(changed_by) if changed_by else None,
            )
        )

    def deactivate(self, deactivated_by):
        """Soft-delete: hide the order from its owner."""
        with atomic_change(self):
            self.is_active = False
            self.updated_at = datetime.now(UTC)

        self.raise_(OrderDeactivated(order_id=str(self.id), deactivated_by=str(deactivated_by)))
