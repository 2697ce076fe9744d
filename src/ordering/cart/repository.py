"""Cart lookups beyond fetch-by-id."""

from protean.exceptions import ObjectNotFoundError

from ordering.cart.cart import Cart, CartStatus
from ordering.domain import ordering

# Upper bound for full scans; the default query page is much smaller
SCAN_LIMIT = 10_000


@ordering.repository(part_of=Cart)
class CartRepository:
    def owned_by(self, owner_id) -> list[Cart]:
        carts = self._dao.query.filter(owner_id=str(owner_id)).limit(SCAN_LIMIT).all().items
        return sorted(carts, key=lambda c: c.updated_at or c.created_at, reverse=True)

    def active_for(self, owner_id) -> Cart | None:
        carts = (
            self._dao.query.filter(owner_id=str(owner_id), status=CartStatus.ACTIVE.value)
            .limit(SCAN_LIMIT)
            .all()
            .items
        )
        return carts[0] if carts else None

    def require_active_for(self, owner_id) -> Cart:
        cart = self.active_for(owner_id)
        if cart is None:
            raise ObjectNotFoundError({"cart": ["Cart not found"]})
        return cart

    def latest_abandoned_for(self, owner_id) -> Cart | None:
        abandoned = [c for c in self.owned_by(owner_id) if c.status == CartStatus.ABANDONED.value]
        return abandoned[0] if abandoned else None

    def with_status(self, status: str) -> list[Cart]:
        return self._dao.query.filter(status=status).limit(SCAN_LIMIT).all().items

    def every_cart(self) -> list[Cart]:
        carts = self._dao.query.limit(SCAN_LIMIT).all().items
        return sorted(carts, key=lambda c: c.created_at, reverse=True)

    def purge(self, cart: Cart) -> None:
        self._dao.delete(cart)
