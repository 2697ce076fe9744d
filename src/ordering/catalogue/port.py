"""Product catalogue port.

Products are owned by the catalogue service. The ordering service only reads
them: to check existence and stock when items go into a cart, and to project
names and images onto cart read views.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ProductSnapshot:
    """What the catalogue reports about a product at lookup time."""

    product_id: str
    name: dict = field(default_factory=dict)
    price: float = 0.0
    stock: int = 0
    image: str | None = None


class ProductCatalog(ABC):
    """Abstract catalogue collaborator."""

    @abstractmethod
    def lookup(self, product_id: str) -> ProductSnapshot | None:
        """Return the product, or ``None`` if it does not exist."""
        ...

    def describe(self, product_ids: Iterable[str]) -> dict[str, ProductSnapshot]:
        """Look up several products, skipping unknown ones."""
        snapshots = {}
        for product_id in dict.fromkeys(str(pid) for pid in product_ids):
            snapshot = self.lookup(product_id)
            if snapshot is not None:
                snapshots[product_id] = snapshot
        return snapshots
