"""Identity provider factory.

Provides get_identity_provider() / set_identity_provider() to swap implementations:
- FakeIdentityProvider for development and testing
- HttpIdentityProvider when ORDERING_IDENTITY_URL is configured
"""

from ordering.access.fake_adapter import FakeIdentityProvider
from ordering.access.http_adapter import HttpIdentityProvider
from ordering.access.port import Caller, CustomerProfile, IdentityProvider, Role
from ordering.config import get_settings

__all__ = [
    "Caller",
    "CustomerProfile",
    "IdentityProvider",
    "Role",
    "get_identity_provider",
    "reset_identity_provider",
    "set_identity_provider",
]

_current_provider: IdentityProvider | None = None


def get_identity_provider() -> IdentityProvider:
    """Return the current identity provider."""
    global _current_provider
    if _current_provider is None:
        settings = get_settings()
        if settings.identity_url:
            _current_provider = HttpIdentityProvider(settings.identity_url, timeout=settings.http_timeout)
        else:
            _current_provider = FakeIdentityProvider()
    return _current_provider


def set_identity_provider(provider: IdentityProvider) -> None:
    """Override the active identity provider (useful for tests)."""
    global _current_provider
    _current_provider = provider


def reset_identity_provider() -> None:
    """Reset to the default identity provider."""
    global _current_provider
    _current_provider = None
