"""Order edits: commands and handler.

An edit is a partial patch. Every supplied field is validated before any is
applied. Customers may edit their own orders until they ship, and never touch
status, payment status or the active flag.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.access import Caller, Role
from ordering.domain import ordering
from ordering.errors import Forbidden
from ordering.order import validation
from ordering.order.order import Order
from ordering.shared.localized_text import localized_text

logger = structlog.get_logger(__name__)

EDITABLE_FIELDS = {"items", "shipping_address", "payment_method", "notes", "status", "payment_status", "is_active"}
ADMIN_ONLY_FIELDS = {"status", "payment_status", "is_active"}


@ordering.command(part_of="Order")
class UpdateOrder:
    caller_id = Identifier(required=True)
    caller_role = String(choices=Role, default=Role.USER.value)
    order_id = Identifier(required=True)
    changes = Text(required=True)  # JSON object; a null value clears notes


@ordering.command(part_of="Order")
class UpdateOrderNotes:
    caller_id = Identifier(required=True)
    caller_role = String(choices=Role, default=Role.USER.value)
    order_id = Identifier(required=True)
    notes = Text()  # JSON: {en?, ar?}; absent clears


@ordering.command(part_of="Order")
class DeactivateOrder:
    caller_id = Identifier(required=True)
    caller_role = String(choices=Role, default=Role.USER.value)
    order_id = Identifier(required=True)


def _loads(value):
    return json.loads(value) if isinstance(value, str) else value


def _validated_edits(order, patch) -> dict:
    edits = {}
    if "items" in patch:
        edits["items"] = validation.order_items(patch["items"])
    if "shipping_address" in patch:
        edits["shipping_address"] = validation.shipping_address(
            patch["shipping_address"], current=order.shipping_address
        )
    if "payment_method" in patch:
        edits["payment_method"] = validation.payment_method(patch["payment_method"])
    if "notes" in patch:
        edits["notes"] = localized_text(patch["notes"], "notes")
    if "is_active" in patch:
        if not isinstance(patch["is_active"], bool):
            raise ValidationError({"is_active": ["is_active must be true or false"]})
        edits["is_active"] = patch["is_active"]
    return edits


def apply_order_changes(caller: Caller, order_id, patch) -> Order:
    if not isinstance(patch, dict):
        raise ValidationError({"order": ["No changes supplied"]})
    unknown = set(patch) - EDITABLE_FIELDS
    if unknown:
        raise ValidationError({"order": [f"Unknown field(s): {', '.join(sorted(unknown))}"]})
    # A null status, payment status or active flag means "leave it alone"
    patch = {field: value for field, value in patch.items() if field not in ADMIN_ONLY_FIELDS or value is not None}
    if not patch:
        raise ValidationError({"order": ["No changes supplied"]})

    repo = current_domain.repository_for(Order)
    order = repo.get_for(caller, order_id)

    if not caller.is_admin:
        if order.is_locked_for_customer:
            raise Forbidden(f"Order cannot be modified once it is {order.status}")
        if ADMIN_ONLY_FIELDS & set(patch):
            raise Forbidden("Only administrators can change status, payment status or active flag")

    edits = _validated_edits(order, patch)

    new_payment_status = patch.get("payment_status")
    if new_payment_status is not None and new_payment_status != order.payment_status:
        order.check_payment_change(new_payment_status)
    else:
        new_payment_status = None

    new_status = patch.get("status")
    if new_status is not None and new_status != order.status:
        order.check_status_change(new_status)
    else:
        new_status = None

    order.revise(edits, changed_by=caller.user_id)
    if new_payment_status is not None:
        order.change_payment_status(new_payment_status, changed_by=caller.user_id)
    # Paying may already have advanced the order to the requested status
    if new_status is not None and new_status != order.status:
        order.transition_to(new_status, changed_by=caller.user_id)

    repo.add(order)
    logger.info(
        "Order updated",
        order_id=str(order.id),
        fields=sorted(patch),
        caller_id=caller.user_id,
        total_order_price=order.total_order_price,
    )
    return order


@ordering.command_handler(part_of=Order)
class ModifyOrderHandler:
    @handle(UpdateOrder)
    def update_order(self, command):
        return apply_order_changes(Caller.from_command(command), command.order_id, _loads(command.changes))

    @handle(UpdateOrderNotes)
    def update_order_notes(self, command):
        return apply_order_changes(
            Caller.from_command(command),
            command.order_id,
            {"notes": _loads(command.notes) if command.notes else None},
        )

    @handle(DeactivateOrder)
    def deactivate_order(self, command):
        caller = Caller.from_command(command)
        if not caller.is_admin:
            raise Forbidden("Only administrators can delete orders")

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.deactivate(deactivated_by=caller.user_id)
        repo.add(order)

        logger.info("Order deactivated", order_id=str(order.id), admin_id=caller.user_id)
        return order
