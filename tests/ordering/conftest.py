"""Shared fixtures for the Ordering domain: a seeded catalogue, known callers and order payloads."""

import json

import pytest
from ordering.access import Caller, reset_identity_provider, set_identity_provider
from ordering.access.fake_adapter import FakeIdentityProvider
from ordering.catalogue import reset_catalog, set_catalog
from ordering.catalogue.memory_adapter import InMemoryProductCatalog
from ordering.config import get_settings

USER_TOKEN = "user-token"
OTHER_TOKEN = "other-token"
ADMIN_TOKEN = "admin-token"


@pytest.fixture(autouse=True)
def catalog():
    """In-memory catalogue with three products of different stock levels."""
    fake = InMemoryProductCatalog()
    fake.add_product("prod-001", name={"en": "Dates Box", "ar": "علبة تمر"}, price=10.0, stock=10)
    fake.add_product("prod-002", name={"en": "Arabic Coffee", "ar": "قهوة عربية"}, price=25.5, stock=5)
    fake.add_product("prod-003", name={"en": "Oud Perfume"}, price=99.99, stock=1, image="oud.png")
    set_catalog(fake)
    yield fake
    reset_catalog()


@pytest.fixture(autouse=True)
def identity():
    fake = FakeIdentityProvider()
    fake.register(USER_TOKEN, "user-1", first_name="Layla", last_name="Hassan", email="layla@example.com")
    fake.register(OTHER_TOKEN, "user-2", first_name="Omar", email="omar@example.com")
    fake.register(ADMIN_TOKEN, "admin-1", role="admin", first_name="Admin")
    set_identity_provider(fake)
    yield fake
    reset_identity_provider()


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def customer():
    return Caller(user_id="user-1")


@pytest.fixture()
def other_customer():
    return Caller(user_id="user-2")


@pytest.fixture()
def admin():
    return Caller(user_id="admin-1", role="admin")


@pytest.fixture()
def address_payload():
    return {
        "address": {"en": "12 King Fahd Road", "ar": "12 طريق الملك فهد"},
        "city": {"en": "Riyadh", "ar": "الرياض"},
        "country": {"en": "Saudi Arabia", "ar": "السعودية"},
        "postal_code": "12211",
    }


@pytest.fixture()
def address_json(address_payload):
    return json.dumps(address_payload, ensure_ascii=False)
