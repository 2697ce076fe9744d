"""Tests for the HTTP catalogue and identity adapters against a mocked session."""

from unittest.mock import MagicMock

import pytest
import requests
from ordering.access import get_identity_provider, reset_identity_provider
from ordering.access.http_adapter import HttpIdentityProvider
from ordering.catalogue import get_catalog, reset_catalog
from ordering.catalogue.http_adapter import HttpProductCatalog
from ordering.config import get_settings

pytestmark = pytest.mark.fast


def _response(status_code=200, payload=None):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload or {}
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    return response


def _session(response):
    session = MagicMock()
    session.get.return_value = response
    return session


class TestHttpProductCatalog:
    def test_lookup_unwraps_envelope(self):
        session = _session(
            _response(
                payload={
                    "status": "success",
                    "data": {
                        "product": {
                            "_id": "prod-001",
                            "name": {"en": "Dates Box", "ar": "علبة تمر"},
                            "price": 10,
                            "quantity": 7,
                            "imageCover": "dates.png",
                        }
                    },
                }
            )
        )
        catalog = HttpProductCatalog("http://catalogue.local/api/", timeout=2.0, session=session)

        snapshot = catalog.lookup("prod-001")

        session.get.assert_called_once_with("http://catalogue.local/api/products/prod-001", timeout=2.0)
        assert snapshot.product_id == "prod-001"
        assert snapshot.name == {"en": "Dates Box", "ar": "علبة تمر"}
        assert snapshot.price == 10.0
        assert snapshot.stock == 7
        assert snapshot.image == "dates.png"

    def test_plain_string_name(self):
        session = _session(_response(payload={"id": "p-9", "name": "Kettle", "price": 12.5, "stock": 3}))
        snapshot = HttpProductCatalog("http://c", session=session).lookup("p-9")
        assert snapshot.name == {"en": "Kettle"}
        assert snapshot.stock == 3

    def test_not_found(self):
        catalog = HttpProductCatalog("http://c", session=_session(_response(404)))
        assert catalog.lookup("missing") is None

    def test_server_error_propagates(self):
        catalog = HttpProductCatalog("http://c", session=_session(_response(503)))
        with pytest.raises(requests.HTTPError):
            catalog.lookup("prod-001")


class TestHttpIdentityProvider:
    def test_authenticate(self):
        session = _session(_response(payload={"data": {"user": {"_id": "u-1", "role": "admin"}}}))
        provider = HttpIdentityProvider("http://auth.local", session=session)

        caller = provider.authenticate("tok")

        args, kwargs = session.get.call_args
        assert args[0] == "http://auth.local/users/me"
        assert kwargs["headers"] == {"Authorization": "Bearer tok"}
        assert caller.user_id == "u-1"
        assert caller.is_admin

    @pytest.mark.parametrize("status_code", [401, 403])
    def test_rejected_token(self, status_code):
        provider = HttpIdentityProvider("http://auth.local", session=_session(_response(status_code)))
        assert provider.authenticate("tok") is None

    def test_profile(self):
        session = _session(
            _response(payload={"user": {"id": "u-1", "firstName": "Layla", "email": "layla@example.com"}})
        )
        profile = HttpIdentityProvider("http://auth.local", session=session).profile("u-1")
        assert profile.user_id == "u-1"
        assert profile.first_name == "Layla"
        assert profile.email == "layla@example.com"

    def test_unknown_profile(self):
        provider = HttpIdentityProvider("http://auth.local", session=_session(_response(404)))
        assert provider.profile("u-404") is None


class TestAdapterSelection:
    @pytest.fixture(autouse=True)
    def _reset(self):
        reset_catalog()
        reset_identity_provider()
        yield
        reset_catalog()
        reset_identity_provider()

    def test_http_adapters_when_urls_configured(self, monkeypatch):
        monkeypatch.setenv("ORDERING_CATALOGUE_URL", "http://catalogue.local")
        monkeypatch.setenv("ORDERING_IDENTITY_URL", "http://auth.local")
        monkeypatch.setenv("ORDERING_HTTP_TIMEOUT", "1.5")
        get_settings.cache_clear()

        catalog = get_catalog()
        assert isinstance(catalog, HttpProductCatalog)
        assert catalog.timeout == 1.5
        assert isinstance(get_identity_provider(), HttpIdentityProvider)

    def test_in_process_adapters_by_default(self, monkeypatch):
        monkeypatch.delenv("ORDERING_CATALOGUE_URL", raising=False)
        monkeypatch.delenv("ORDERING_IDENTITY_URL", raising=False)
        get_settings.cache_clear()

        assert not isinstance(get_catalog(), HttpProductCatalog)
        assert not isinstance(get_identity_provider(), HttpIdentityProvider)
