"""Read-side order queries."""

import math
from dataclasses import dataclass, field

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from ordering.access import Caller
from ordering.config import get_settings
from ordering.errors import Forbidden
from ordering.order.order import Order, OrderStatus, PaymentStatus
from ordering.shared.money import round_money


@dataclass
class OrderPage:
    orders: list = field(default_factory=list)
    current_page: int = 1
    total_pages: int = 0
    total_orders: int = 0
    limit: int = 10
    total_revenue: float = 0.0
    average_order_value: float = 0.0

    @property
    def has_next_page(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_prev_page(self) -> bool:
        return self.current_page > 1


@dataclass
class OwnerOrders:
    owner_id: str
    orders: list = field(default_factory=list)
    total_orders: int = 0
    total_revenue: float = 0.0


def _require_admin(caller: Caller) -> None:
    if not caller.is_admin:
        raise Forbidden()


def _check_choice(enum_cls, value, field_name):
    if value is not None and value not in {member.value for member in enum_cls}:
        raise ValidationError({field_name: [f"Invalid {field_name} filter '{value}'"]})


def get_order(caller: Caller, order_id) -> Order:
    return current_domain.repository_for(Order).get_for(caller, order_id)


def list_my_orders(caller: Caller) -> list[Order]:
    return current_domain.repository_for(Order).owned_by(caller.user_id)


def list_orders_by_owner(caller: Caller, owner_id) -> OwnerOrders:
    _require_admin(caller)
    orders = current_domain.repository_for(Order).owned_by(owner_id, include_inactive=True)
    return OwnerOrders(
        owner_id=str(owner_id),
        orders=orders,
        total_orders=len(orders),
        total_revenue=round_money(sum(o.total_order_price for o in orders)),
    )


def list_all_orders(
    caller: Caller,
    status: str | None = None,
    payment_status: str | None = None,
    owner_id: str | None = None,
    page: int = 1,
    limit: int | None = None,
) -> OrderPage:
    """Paginated listing over every order, newest first. Admin only.

    Revenue figures cover the whole filtered set, not just the page.
    """
    _require_admin(caller)
    _check_choice(OrderStatus, status, "status")
    _check_choice(PaymentStatus, payment_status, "payment_status")

    settings = get_settings()
    limit = settings.default_page_size if limit is None else limit
    if page < 1:
        raise ValidationError({"page": ["Page must be at least 1"]})
    if limit < 1 or limit > settings.max_page_size:
        raise ValidationError({"limit": [f"Limit must be between 1 and {settings.max_page_size}"]})

    # TODO: push offset/limit into the query once revenue totals come from an aggregate query
    matching = current_domain.repository_for(Order).matching(
        status=status, payment_status=payment_status, owner_id=owner_id
    )
    total_orders = len(matching)
    total_revenue = round_money(sum(o.total_order_price for o in matching))
    start = (page - 1) * limit

    return OrderPage(
        orders=matching[start : start + limit],
        current_page=page,
        total_pages=math.ceil(total_orders / limit),
        total_orders=total_orders,
        limit=limit,
        total_revenue=total_revenue,
        average_order_value=round_money(total_revenue / total_orders) if total_orders else 0.0,
    )
