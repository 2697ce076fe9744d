"""Product catalogue factory.

Provides get_catalog() / set_catalog() to swap implementations:
- InMemoryProductCatalog for development and testing
- HttpProductCatalog when ORDERING_CATALOGUE_URL is configured
"""

from ordering.catalogue.http_adapter import HttpProductCatalog
from ordering.catalogue.memory_adapter import InMemoryProductCatalog
from ordering.catalogue.port import ProductCatalog, ProductSnapshot
from ordering.config import get_settings

__all__ = [
    "ProductCatalog",
    "ProductSnapshot",
    "get_catalog",
    "reset_catalog",
    "set_catalog",
]

_current_catalog: ProductCatalog | None = None


def get_catalog() -> ProductCatalog:
    """Return the current product catalogue."""
    global _current_catalog
    if _current_catalog is None:
        settings = get_settings()
        if settings.catalogue_url:
            _current_catalog = HttpProductCatalog(settings.catalogue_url, timeout=settings.http_timeout)
        else:
            _current_catalog = InMemoryProductCatalog()
    return _current_catalog


def set_catalog(catalog: ProductCatalog) -> None:
    """Override the active catalogue (useful for tests)."""
    global _current_catalog
    _current_catalog = catalog


def reset_catalog() -> None:
    """Reset to the default catalogue."""
    global _current_catalog
    _current_catalog = None
