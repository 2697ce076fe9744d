"""Identity port: who is calling, and what the ordering service may show about them.

Token issuance and verification live outside this service. Adapters turn a
bearer token into a ``Caller`` and a user id into a ``CustomerProfile``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class Role(Enum):
    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True)
class Caller:
    """An authenticated caller, passed explicitly into every cart and order operation."""

    user_id: str
    role: str = Role.USER.value

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def owns(self, owner_id) -> bool:
        return str(owner_id) == str(self.user_id)

    def may_access(self, owner_id) -> bool:
        return self.is_admin or self.owns(owner_id)

    @classmethod
    def from_command(cls, command) -> "Caller":
        return cls(user_id=str(command.caller_id), role=command.caller_role or Role.USER.value)


@dataclass(frozen=True)
class CustomerProfile:
    """The customer fields exposed on order and cart read views."""

    user_id: str
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone_number: str | None = None
    profile_picture: str | None = None


class IdentityProvider(ABC):
    """Abstract identity collaborator."""

    @abstractmethod
    def authenticate(self, token: str) -> Caller | None:
        """Return the caller for a valid token, ``None`` otherwise."""
        ...

    @abstractmethod
    def profile(self, user_id: str) -> CustomerProfile | None:
        """Return the public profile for a user, ``None`` if unknown."""
        ...
