"""Errors raised by the ordering service beyond protean's own.

Validation problems use ``protean.exceptions.ValidationError`` and missing
records use ``protean.exceptions.ObjectNotFoundError``; the classes below cover
the remaining caller-facing failures.
"""

from protean.exceptions import ValidationError


class NotAuthenticated(Exception):
    """The request carried no valid credential."""

    def __init__(self, message: str = "You are not logged in. Please log in to get access."):
        super().__init__(message)
        self.message = message


class Forbidden(Exception):
    """The caller is authenticated but may not perform the operation."""

    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(message)
        self.message = message


class InsufficientStock(ValidationError):
    """The catalogue reports less stock than the requested quantity."""

    def __init__(self, product_id: str, requested: int, available: int):
        super().__init__({"quantity": [f"Not enough stock available for product {product_id}"]})
        self.product_id = product_id
        self.requested = requested
        self.available = available
