"""Administrative cart operations: direct edits and hard deletes by cart id."""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.access import Caller, Role
from ordering.cart.cart import Cart, CartStatus
from ordering.domain import ordering
from ordering.errors import Forbidden
from ordering.shared.localized_text import localized_text
from ordering.shared.money import is_amount

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Cart")
class AdminUpdateCart:
    caller_id = Identifier(required=True)
    caller_role = String(choices=Role, default=Role.USER.value)
    cart_id = Identifier(required=True)
    discount = Float()
    discount_description = Text()  # JSON: {en?, ar?}
    notes = Text()  # JSON: {en?, ar?}
    clear_notes = Boolean(default=False)
    status = String(max_length=20)


@ordering.command(part_of="Cart")
class AdminDeleteCart:
    caller_id = Identifier(required=True)
    caller_role = String(choices=Role, default=Role.USER.value)
    cart_id = Identifier(required=True)


def require_admin(caller: Caller) -> None:
    if not caller.is_admin:
        raise Forbidden()


def _text(raw, field):
    return localized_text(json.loads(raw) if isinstance(raw, str) else raw, field)


@ordering.command_handler(part_of=Cart)
class AdminCartHandler:
    @handle(AdminUpdateCart)
    def admin_update_cart(self, command):
        caller = Caller.from_command(command)
        require_admin(caller)

        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)

        # Validate every supplied field before changing anything
        description = _text(command.discount_description, "discount_description") if command.discount_description else None
        notes = _text(command.notes, "notes") if command.notes else None
        if command.discount is not None and not (is_amount(command.discount) and 0 <= command.discount <= 100):
            raise ValidationError({"discount": ["Discount must be between 0 and 100"]})
        if command.status is not None:
            if command.status not in (CartStatus.ACTIVE.value, CartStatus.ABANDONED.value):
                raise ValidationError({"status": ["Status can only be set to active or abandoned"]})
            if command.status == CartStatus.ACTIVE.value and cart.status == CartStatus.ABANDONED.value:
                other = repo.active_for(cart.owner_id)
                if other is not None and str(other.id) != str(cart.id):
                    raise ValidationError({"status": ["The customer already has an active cart"]})

        if command.discount is not None or description is not None:
            cart.apply_discount(cart.discount if command.discount is None else command.discount, description)
        if notes is not None or command.clear_notes:
            cart.update_notes(notes)
        if command.status is not None and command.status != cart.status:
            if command.status == CartStatus.ABANDONED.value:
                cart.abandon()
            else:
                cart.reactivate()

        repo.add(cart)
        logger.info("Cart updated by admin", cart_id=str(cart.id), admin_id=caller.user_id)
        return cart

    @handle(AdminDeleteCart)
    def admin_delete_cart(self, command):
        caller = Caller.from_command(command)
        require_admin(caller)

        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        repo.purge(cart)

        logger.info("Cart deleted by admin", cart_id=str(command.cart_id), admin_id=caller.user_id)
        return str(command.cart_id)
