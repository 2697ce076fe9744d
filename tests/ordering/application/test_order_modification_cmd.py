"""Application tests for partial order edits."""

import json

import pytest
from ordering.errors import Forbidden
from ordering.order.creation import PlaceOrder
from ordering.order.modification import UpdateOrder, UpdateOrderNotes
from ordering.order.order import Order
from ordering.order.status import TransitionOrderStatus
from protean import current_domain
from protean.exceptions import ValidationError


@pytest.fixture()
def order(address_json):
    return current_domain.process(
        PlaceOrder(
            caller_id="user-1",
            items=json.dumps([{"product_id": "prod-001", "quantity": 2, "price": 10.0}]),
            shipping_address=address_json,
            payment_method="cash",
            notes=json.dumps({"en": "Original note"}),
        ),
        asynchronous=False,
    )


def _update(order, changes, caller_id="user-1", caller_role="user"):
    return current_domain.process(
        UpdateOrder(
            caller_id=caller_id,
            caller_role=caller_role,
            order_id=str(order.id),
            changes=json.dumps(changes, ensure_ascii=False),
        ),
        asynchronous=False,
    )


def _reload(order):
    return current_domain.repository_for(Order).get(order.id)


class TestCustomerEdits:
    def test_replace_items_recomputes_total(self, order):
        _update(order, {"items": [{"product": "prod-002", "quantity": 3, "price": 25.5}]})
        stored = _reload(order)
        assert [str(i.product_id) for i in stored.items] == ["prod-002"]
        assert stored.total_order_price == 76.5

    def test_partial_address_patch(self, order):
        _update(order, {"shipping_address": {"city": {"en": "Jeddah", "ar": "جدة"}}})
        address = _reload(order).shipping_address
        assert address.city.ar == "جدة"
        assert address.country.en == "Saudi Arabia"
        assert address.postal_code == "12211"

    def test_payment_method(self, order):
        _update(order, {"payment_method": "bank_transfer"})
        assert _reload(order).payment_method == "bank_transfer"

    def test_null_notes_clear(self, order):
        _update(order, {"notes": None})
        assert _reload(order).notes is None

    def test_notes_command(self, order):
        current_domain.process(
            UpdateOrderNotes(caller_id="user-1", order_id=str(order.id), notes=json.dumps({"ar": "ملاحظة"})),
            asynchronous=False,
        )
        assert _reload(order).notes.ar == "ملاحظة"

    def test_status_is_admin_only(self, order):
        with pytest.raises(Forbidden):
            _update(order, {"status": "delivered"})

    def test_payment_status_is_admin_only(self, order):
        with pytest.raises(Forbidden):
            _update(order, {"payment_status": "paid"})

    def test_active_flag_is_admin_only(self, order):
        with pytest.raises(Forbidden):
            _update(order, {"is_active": False})

    def test_null_admin_fields_are_ignored(self, order):
        updated = _update(
            order,
            {"status": None, "payment_status": None, "is_active": None, "payment_method": "bank_transfer"},
        )
        assert updated.payment_method == "bank_transfer"
        assert updated.status == "pending"
        assert updated.is_active is True

    def test_only_null_admin_fields_is_an_empty_patch(self, order):
        with pytest.raises(ValidationError):
            _update(order, {"status": None})

    def test_locked_once_shipped(self, order):
        current_domain.process(
            TransitionOrderStatus(caller_id="admin-1", caller_role="admin", order_id=str(order.id), status="shipped"),
            asynchronous=False,
        )
        with pytest.raises(Forbidden):
            _update(order, {"notes": {"en": "Too late"}})

    def test_other_customer_forbidden(self, order):
        with pytest.raises(Forbidden):
            _update(order, {"notes": {"en": "Hijack"}}, caller_id="user-2")


class TestAllOrNothing:
    def test_invalid_field_leaves_order_untouched(self, order):
        with pytest.raises(ValidationError):
            _update(
                order,
                {
                    "notes": {"en": "New note"},
                    "items": [{"product_id": "prod-001", "quantity": 0, "price": 10.0}],
                },
            )
        stored = _reload(order)
        assert stored.notes.en == "Original note"
        assert stored.total_order_price == 20.0

    def test_invalid_status_leaves_order_untouched(self, order):
        with pytest.raises(ValidationError):
            _update(order, {"notes": {"en": "New"}, "status": "teleported"}, caller_id="admin-1", caller_role="admin")
        assert _reload(order).notes.en == "Original note"

    def test_unknown_field_rejected(self, order):
        with pytest.raises(ValidationError):
            _update(order, {"owner_id": "user-2"})

    def test_empty_patch_rejected(self, order):
        with pytest.raises(ValidationError):
            _update(order, {})


class TestAdminEdits:
    def test_status_and_payment_together(self, order):
        _update(order, {"payment_status": "paid", "status": "shipped"}, caller_id="admin-1", caller_role="admin")
        stored = _reload(order)
        assert stored.payment_status == "paid"
        assert stored.status == "shipped"

    def test_paying_moves_pending_to_processing(self, order):
        _update(order, {"payment_status": "paid"}, caller_id="admin-1", caller_role="admin")
        assert _reload(order).status == "processing"

    def test_payment_and_matching_status(self, order):
        _update(order, {"payment_status": "paid", "status": "processing"}, caller_id="admin-1", caller_role="admin")
        assert _reload(order).status == "processing"

    def test_admin_may_edit_shipped_order(self, order):
        _update(order, {"status": "shipped"}, caller_id="admin-1", caller_role="admin")
        _update(order, {"notes": {"en": "Courier called"}}, caller_id="admin-1", caller_role="admin")
        assert _reload(order).notes.en == "Courier called"

    def test_backward_status_rejected(self, order):
        _update(order, {"status": "shipped"}, caller_id="admin-1", caller_role="admin")
        with pytest.raises(ValidationError):
            _update(order, {"status": "pending"}, caller_id="admin-1", caller_role="admin")

    def test_deactivate_through_patch(self, order):
        _update(order, {"is_active": False}, caller_id="admin-1", caller_role="admin")
        assert _reload(order).is_active is False
