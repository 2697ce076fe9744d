"""Product catalogue backed by the catalogue service's HTTP API.

Expects ``GET {base_url}/products/{id}`` to answer with the product document,
optionally wrapped in a ``{"status", "data": {"product": ...}}`` envelope.
No retries: a failing catalogue fails the request.
"""

import requests
import structlog

from ordering.catalogue.port import ProductCatalog, ProductSnapshot

logger = structlog.get_logger(__name__)


def _unwrap(payload) -> dict:
    data = payload.get("data", payload) if isinstance(payload, dict) else {}
    if isinstance(data, dict) and isinstance(data.get("product"), dict):
        return data["product"]
    return data or {}


def _snapshot(product_id: str, document: dict) -> ProductSnapshot:
    name = document.get("name") or {}
    if isinstance(name, str):
        name = {"en": name}
    return ProductSnapshot(
        product_id=str(document.get("id") or document.get("_id") or product_id),
        name=name,
        price=float(document.get("price") or 0.0),
        stock=int(document.get("stock", document.get("quantity")) or 0),
        image=document.get("image") or document.get("imageCover"),
    )


class HttpProductCatalog(ProductCatalog):
    def __init__(self, base_url: str, timeout: float = 5.0, session: requests.Session | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def lookup(self, product_id: str) -> ProductSnapshot | None:
        response = self.session.get(f"{self.base_url}/products/{product_id}", timeout=self.timeout)
        if response.status_code == 404:
            logger.info("Product not found in catalogue", product_id=str(product_id))
            return None
        response.raise_for_status()
        return _snapshot(str(product_id), _unwrap(response.json()))
