"""Cart abandonment: mark idle carts so they stop counting as live.

DetectAbandonedCarts is meant to be triggered periodically by an external
scheduler (cron, K8s CronJob). It scans active carts that still hold items and
have not been touched within the threshold, and dispatches AbandonCart for each.
"""

from datetime import UTC, datetime, timedelta

import structlog
from protean import handle
from protean.exceptions import InvalidOperationError, ValidationError
from protean.fields import DateTime, Identifier, Integer
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart, CartStatus
from ordering.config import get_settings
from ordering.domain import ordering

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Cart")
class AbandonCart:
    """Mark a cart as abandoned."""

    cart_id = Identifier(required=True)


@ordering.command(part_of="Cart")
class DetectAbandonedCarts:
    """Flag active carts idle beyond the specified threshold."""

    idle_threshold_hours = Integer(min_value=1)  # Defaults to ORDERING_ABANDON_AFTER_HOURS
    as_of = DateTime()  # Optional: defaults to now


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value.replace(tzinfo=None)


@ordering.command_handler(part_of=Cart)
class CartAbandonmentHandler:
    @handle(AbandonCart)
    def abandon_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        cart.abandon()
        repo.add(cart)
        return cart

    @handle(DetectAbandonedCarts)
    def detect_abandoned_carts(self, command):
        as_of = command.as_of or datetime.now(UTC)
        threshold_hours = command.idle_threshold_hours or get_settings().abandon_after_hours
        cutoff = _naive_utc(as_of - timedelta(hours=threshold_hours))

        logger.info(
            "Checking for abandoned carts",
            cutoff=cutoff.isoformat(),
            threshold_hours=threshold_hours,
        )

        active_carts = current_domain.repository_for(Cart).with_status(CartStatus.ACTIVE.value)
        idle = [
            cart
            for cart in active_carts
            if cart.items and cart.updated_at and _naive_utc(cart.updated_at) <= cutoff
        ]

        if not idle:
            logger.info("No abandoned carts found")
            return 0

        abandoned_count = 0
        for cart in idle:
            try:
                current_domain.process(AbandonCart(cart_id=str(cart.id)), asynchronous=False)
                abandoned_count += 1
                logger.info(
                    "Marked cart as abandoned",
                    cart_id=str(cart.id),
                    owner_id=str(cart.owner_id),
                    item_count=len(cart.items),
                    last_updated=str(cart.updated_at),
                )
            except (ValidationError, InvalidOperationError) as exc:
                logger.warning(
                    "Failed to abandon cart",
                    cart_id=str(cart.id),
                    error=str(exc),
                )

        logger.info("Cart abandonment detection complete", abandoned_count=abandoned_count)
        return abandoned_count
