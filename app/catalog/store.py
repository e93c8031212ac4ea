"""
==============================================================================
Catalog Store Module
==============================================================================

In-memory custodian of the product collection and the id sequence.

The store performs no validation: it accepts fully formed ``Product``
records and answers lookups. Callers that run a check-then-act sequence
(sku check + insert, stock check + decrement, lookup + price write) hold
``store.lock`` for the whole sequence.

==============================================================================
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional

from .models import Product


# Module logger
logger = logging.getLogger(__name__)


class CatalogStore:
    """
    In-memory product collection with a monotonic id generator.

    Attributes:
        lock: Re-entrant lock guarding read-modify-write sequences

    Example:
        >>> store = CatalogStore()
        >>> store.next_id()
        1
        >>> store.next_id()
        2
    """

    def __init__(self) -> None:
        self._products: List[Product] = []
        self._by_id: Dict[int, Product] = {}
        self._next_id = 1
        self.lock = threading.RLock()

    # =========================================================================
    # WRITES
    # =========================================================================

    def next_id(self) -> int:
        """Issue a fresh id, strictly greater than every id issued before."""
        with self.lock:
            issued = self._next_id
            self._next_id += 1
            return issued

    def insert(self, product: Product) -> Product:
        """Append a fully formed product."""
        with self.lock:
            self._products.append(product)
            self._by_id[product.id] = product
        logger.debug(f"Inserted product id={product.id} sku={product.sku}")
        return product

    # =========================================================================
    # READS
    # =========================================================================

    def find_by_id(self, product_id: Optional[int]) -> Optional[Product]:
        """Find product by id; ``None`` never matches."""
        if product_id is None:
            return None
        with self.lock:
            return self._by_id.get(product_id)

    def find_by_sku(self, sku: str) -> Optional[Product]:
        """Find product by exact (case-sensitive) sku."""
        with self.lock:
            for product in self._products:
                if product.sku == sku:
                    return product
        return None

    def all(self) -> List[Product]:
        """Get all products in insertion order."""
        with self.lock:
            return self._products.copy()

    def filter_by_category(self, category: str) -> List[Product]:
        """Get products in a category."""
        with self.lock:
            return [p for p in self._products if p.category == category]

    def search_by_keyword(self, keyword: str) -> List[Product]:
        """
        Case-insensitive substring search on name OR sku.

        Args:
            keyword: Search text (used as given, no trimming)

        Returns:
            Matching products in insertion order
        """
        needle = keyword.lower()
        with self.lock:
            return [
                p for p in self._products
                if needle in p.name.lower() or needle in p.sku.lower()
            ]

    def count(self) -> int:
        """Number of stored products."""
        with self.lock:
            return len(self._products)
