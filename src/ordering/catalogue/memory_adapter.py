"""In-memory product catalogue for development and testing."""

from ordering.catalogue.port import ProductCatalog, ProductSnapshot


class InMemoryProductCatalog(ProductCatalog):
    def __init__(self) -> None:
        self._products: dict[str, ProductSnapshot] = {}
        self.calls: list[dict] = []

    def add_product(
        self,
        product_id: str,
        name: dict | None = None,
        price: float = 0.0,
        stock: int = 0,
        image: str | None = None,
    ) -> ProductSnapshot:
        snapshot = ProductSnapshot(
            product_id=str(product_id),
            name=name or {"en": f"Product {product_id}"},
            price=price,
            stock=stock,
            image=image,
        )
        self._products[snapshot.product_id] = snapshot
        return snapshot

    def set_stock(self, product_id: str, stock: int) -> None:
        current = self._products[str(product_id)]
        self._products[current.product_id] = ProductSnapshot(
            product_id=current.product_id,
            name=current.name,
            price=current.price,
            stock=stock,
            image=current.image,
        )

    def lookup(self, product_id: str) -> ProductSnapshot | None:
        self.calls.append({"method": "lookup", "product_id": str(product_id)})
        return self._products.get(str(product_id))
