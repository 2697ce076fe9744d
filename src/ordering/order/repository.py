"""Order lookups beyond fetch-by-id."""

from protean.exceptions import ObjectNotFoundError

from ordering.access import Caller
from ordering.domain import ordering
from ordering.errors import Forbidden
from ordering.order.order import Order

# Upper bound for full scans; the default query page is much smaller
SCAN_LIMIT = 10_000


def _newest_first(orders):
    return sorted(orders, key=lambda o: o.created_at, reverse=True)


@ordering.repository(part_of=Order)
class OrderRepository:
    def owned_by(self, owner_id, include_inactive: bool = False) -> list[Order]:
        orders = self._dao.query.filter(owner_id=str(owner_id)).limit(SCAN_LIMIT).all().items
        if not include_inactive:
            orders = [o for o in orders if o.is_active]
        return _newest_first(orders)

    def matching(self, status=None, payment_status=None, owner_id=None) -> list[Order]:
        """Orders matching every filter given, newest first."""
        criteria = {}
        if status:
            criteria["status"] = status
        if payment_status:
            criteria["payment_status"] = payment_status
        if owner_id:
            criteria["owner_id"] = str(owner_id)

        query = self._dao.query.filter(**criteria) if criteria else self._dao.query
        return _newest_first(query.limit(SCAN_LIMIT).all().items)

    def get_for(self, caller: Caller, order_id) -> Order:
        """Fetch an order the caller may see.

        Raises ObjectNotFoundError when missing (or soft-deleted, for
        non-admins) and Forbidden when the caller neither owns it nor is an admin.
        """
        order = self.get(order_id)
        if not order.is_active and not caller.is_admin:
            raise ObjectNotFoundError({"order": ["Order not found"]})
        if not caller.may_access(order.owner_id):
            raise Forbidden("You do not have permission to access this order")
        return order
