"""Ordering bounded context: Shopping Cart and Order Management.

Handles the bilingual (English/Arabic) shopping cart, the order lifecycle
state machine, and the checkout flow that converts a cart into an order.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
