"""Ordering domain API package."""

from ordering.api.errors import register_exception_handlers
from ordering.api.routes import cart_router, order_router

__all__ = ["cart_router", "order_router", "register_exception_handlers"]
