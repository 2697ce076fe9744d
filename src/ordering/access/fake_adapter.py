"""In-process identity provider for development and tests.

Tokens are registered up front; any other token is rejected.
"""

from ordering.access.port import Caller, CustomerProfile, IdentityProvider, Role


class FakeIdentityProvider(IdentityProvider):
    def __init__(self) -> None:
        self._tokens: dict[str, Caller] = {}
        self._profiles: dict[str, CustomerProfile] = {}
        self.calls: list[dict] = []

    def register(
        self,
        token: str,
        user_id: str,
        role: str = Role.USER.value,
        first_name: str | None = None,
        last_name: str | None = None,
        email: str | None = None,
        phone_number: str | None = None,
        profile_picture: str | None = None,
    ) -> Caller:
        caller = Caller(user_id=user_id, role=role)
        self._tokens[token] = caller
        self._profiles[user_id] = CustomerProfile(
            user_id=user_id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone_number=phone_number,
            profile_picture=profile_picture,
        )
        return caller

    def authenticate(self, token: str) -> Caller | None:
        self.calls.append({"method": "authenticate", "token": token})
        return self._tokens.get(token)

    def profile(self, user_id: str) -> CustomerProfile | None:
        self.calls.append({"method": "profile", "user_id": user_id})
        return self._profiles.get(str(user_id))
