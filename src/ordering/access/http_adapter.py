"""Identity provider backed by the auth service's HTTP API."""

import requests
import structlog

from ordering.access.port import Caller, CustomerProfile, IdentityProvider, Role

logger = structlog.get_logger(__name__)


def _unwrap(payload: dict) -> dict:
    """Strip the ``{"status", "data": {"user": ...}}`` envelope if present."""
    data = payload.get("data", payload) if isinstance(payload, dict) else {}
    if isinstance(data, dict) and isinstance(data.get("user"), dict):
        return data["user"]
    return data or {}


class HttpIdentityProvider(IdentityProvider):
    def __init__(self, base_url: str, timeout: float = 5.0, session: requests.Session | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def authenticate(self, token: str) -> Caller | None:
        response = self.session.get(
            f"{self.base_url}/users/me",
            headers={"Authorization": f"Bearer {token}"},
            timeout=self.timeout,
        )
        if response.status_code in (401, 403):
            logger.info("Token rejected by identity service", status_code=response.status_code)
            return None
        response.raise_for_status()

        user = _unwrap(response.json())
        user_id = user.get("id") or user.get("_id")
        if not user_id:
            return None
        return Caller(user_id=str(user_id), role=user.get("role") or Role.USER.value)

    def profile(self, user_id: str) -> CustomerProfile | None:
        response = self.session.get(f"{self.base_url}/users/{user_id}", timeout=self.timeout)
        if response.status_code == 404:
            return None
        response.raise_for_status()

        user = _unwrap(response.json())
        return CustomerProfile(
            user_id=str(user.get("id") or user.get("_id") or user_id),
            first_name=user.get("firstName"),
            last_name=user.get("lastName"),
            email=user.get("email"),
            phone_number=user.get("phoneNumber"),
            profile_picture=user.get("profilePicture"),
        )
