"""Runtime settings for the ordering service, read from environment variables."""

import os
from dataclasses import dataclass
from functools import lru_cache


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


@dataclass(frozen=True)
class Settings:
    catalogue_url: str | None = None
    identity_url: str | None = None
    http_timeout: float = 5.0
    default_page_size: int = 10
    max_page_size: int = 100
    abandon_after_hours: int = 24

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            catalogue_url=os.getenv("ORDERING_CATALOGUE_URL") or None,
            identity_url=os.getenv("ORDERING_IDENTITY_URL") or None,
            http_timeout=float(os.getenv("ORDERING_HTTP_TIMEOUT", "5.0")),
            default_page_size=_int_env("ORDERING_DEFAULT_PAGE_SIZE", 10),
            max_page_size=_int_env("ORDERING_MAX_PAGE_SIZE", 100),
            abandon_after_hours=_int_env("ORDERING_ABANDON_AFTER_HOURS", 24),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return process-wide settings. Call ``get_settings.cache_clear()`` to reload."""
    return Settings.from_env()
