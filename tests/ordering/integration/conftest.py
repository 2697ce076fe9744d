import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from ordering.api import cart_router, order_router, register_exception_handlers
from ordering.domain import ordering


@pytest.fixture()
def client():
    app = FastAPI()

    @app.middleware("http")
    async def domain_context(request: Request, call_next):
        with ordering.domain_context():
            return await call_next(request)

    register_exception_handlers(app)
    app.include_router(cart_router)
    app.include_router(order_router)
    return TestClient(app, raise_server_exceptions=False)


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def user_headers():
    return _bearer("user-token")


@pytest.fixture()
def other_headers():
    return _bearer("other-token")


@pytest.fixture()
def admin_headers():
    return _bearer("admin-token")
