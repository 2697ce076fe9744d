"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance keeps its own state; nothing is shared across users.
"""

from dataclasses import dataclass, field


@dataclass
class CartState:
    """Tracks a shopper's cart between requests."""

    cart_id: str | None = None
    product_ids: list[str] = field(default_factory=list)
    total_quantity: int = 0


@dataclass
class OrderState:
    """Tracks the order produced by checkout."""

    order_id: str | None = None
    current_status: str = "pending"
    payment_status: str = "pending"
