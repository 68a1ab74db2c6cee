# shopsense/domain/repositories/catalog_store.py

from __future__ import annotations
from typing import Dict, Iterable, Mapping, Tuple
from types import MappingProxyType
import threading

from shopsense.domain.models.product import CategoryStats, KnowledgeBaseStats, Product

class CatalogStore:
    """
    In-memory product catalog: category name -> ordered products.
    No business logic here, just indexing and lookup.

    Writers build a whole new mapping and swap it in under a lock, so a reader
    holding a snapshot sees either the old or the new list for a category,
    never a half-written one.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._categories: Mapping[str, Tuple[Product, ...]] = MappingProxyType({})

    def index(self, category: str, products: Iterable[Product]) -> int:
        """
        Replace every product stored under `category`.
        Returns the number of products now indexed for it.
        """
        items = tuple(products)
        with self._lock:
            updated: Dict[str, Tuple[Product, ...]] = dict(self._categories)
            updated[category] = items
            self._categories = MappingProxyType(updated)
        return len(items)

    def snapshot(self) -> Mapping[str, Tuple[Product, ...]]:
        """Read-only view of the catalog as of this call."""
        return self._categories

    def categories(self) -> Dict[str, int]:
        """Indexed category names with their product counts."""
        return {name: len(items) for name, items in self._categories.items()}

    def stats(self) -> KnowledgeBaseStats:
        counts = self.categories()
        return KnowledgeBaseStats(
            categories_count=len(counts),
            total_products=sum(counts.values()),
            categories=[CategoryStats(name=n, product_count=c) for n, c in counts.items()],
        )

    def __len__(self) -> int:
        return len(self._categories)
