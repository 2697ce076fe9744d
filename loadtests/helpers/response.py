"""Response parsing for load test observability.

The ordering API wraps every body in an envelope:

- Success: {"status": "success", "data": {...}, "results"?: n}
- Client errors (400/401/403/404): {"status": "fail", "message": "...", "errors"?: [...]}
- Server faults (500): {"status": "error", "message": "..."}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a compact, human-readable message from an error response."""
    try:
        body = response.json()
    except ValueError:
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if isinstance(body, dict) and "message" in body:
        return str(body["message"])

    return str(body)[:300]


def envelope_data(response: Response, key: str) -> dict:
    """Return ``data[key]`` from a success envelope, or an empty dict."""
    try:
        body = response.json()
    except ValueError:
        return {}
    return (body.get("data") or {}).get(key) or {}
