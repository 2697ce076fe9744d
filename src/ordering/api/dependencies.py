"""FastAPI dependencies: caller authentication, role gates and response language."""

from fastapi import Depends, Header, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ordering.access import Caller, get_identity_provider
from ordering.errors import Forbidden, NotAuthenticated
from ordering.presenters import Projector
from ordering.shared.localization import resolve_language
from ordering.utils.logging import add_context

bearer_scheme = HTTPBearer(auto_error=False)


async def current_caller(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Caller:
    """Resolve the caller from a bearer token or the ``access_token`` cookie."""
    token = credentials.credentials if credentials else request.cookies.get("access_token")
    if not token:
        raise NotAuthenticated()

    caller = get_identity_provider().authenticate(token)
    if caller is None:
        raise NotAuthenticated("Invalid or expired token. Please log in again.")

    add_context(caller_id=caller.user_id, caller_role=caller.role)
    return caller


async def admin_caller(caller: Caller = Depends(current_caller)) -> Caller:
    if not caller.is_admin:
        raise Forbidden()
    return caller


async def requested_language(
    lang: str | None = Query(default=None),
    accept_language: str | None = Header(default=None),
) -> str:
    return resolve_language(lang, accept_language)


async def projector(lang: str = Depends(requested_language)) -> Projector:
    return Projector(lang)
