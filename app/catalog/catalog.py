"""
==============================================================================
Product Catalog Module
==============================================================================

Catalog operations composed from the store and the validators.

Features:
---------
- Create with full field validation (all errors reported together)
- Sale that decrements stock, never below zero
- Bulk price update with per-entry partial success
- Category listing, keyword search, lookup by id

Consistency:
-----------
Each mutating operation holds the store lock for its whole duration, so
the sku check + insert, the stock check + decrement and every lookup +
price write in a batch happen atomically with respect to other requests.

Bulk updates are applied strictly in input order. A later entry sees the
effect of an earlier entry that targeted the same product.

==============================================================================
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from app.core import exceptions

from .categories import ALLOWED_CATEGORIES, allowed_categories_text, is_allowed_category
from .models import Product
from .store import CatalogStore
from .validation import (
    PriceValidator,
    ProductValidator,
    QuantityValidator,
    parse_product_id,
)


# Module logger
logger = logging.getLogger(__name__)


def _as_mapping(payload: Any) -> Mapping[str, Any]:
    return payload if isinstance(payload, Mapping) else {}


class ProductCatalog:
    """
    Product catalog manager: mutations and queries over one store.

    Attributes:
        store: The CatalogStore this catalog operates on

    Example:
        >>> catalog = ProductCatalog(CatalogStore())
        >>> product = catalog.create({"name": "Rice", "sku": "RC-001",
        ...                           "price": 45, "stock": 10, "category": "อาหาร"})
        >>> catalog.sell({"productId": product.id, "quantity": 3})["product"]["remainingStock"]
        7
    """

    def __init__(self, store: Optional[CatalogStore] = None) -> None:
        """
        Initialize catalog.

        Args:
            store: Store to operate on (a new empty one if None)
        """
        self.store = store or CatalogStore()
        self._product_validator = ProductValidator(self.store.find_by_sku)
        self._quantity_validator = QuantityValidator()
        self._price_validator = PriceValidator()

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def create(self, payload: Any) -> Product:
        """
        Validate a candidate and store it as a new product.

        Args:
            payload: Raw candidate fields

        Returns:
            The stored Product

        Raises:
            AppException: VALIDATION_ERROR with every field message
        """
        data = _as_mapping(payload)

        with self.store.lock:
            errors = self._product_validator.validate(data, is_update=False)
            if errors:
                logger.debug(f"Create rejected: {errors}")
                raise exceptions.validation_error(errors)

            product = Product(
                id=self.store.next_id(),
                name=data["name"].strip(),
                sku=data["sku"].strip(),
                price=data["price"],
                stock=data["stock"],
                category=data["category"].strip(),
                created_at=datetime.now(timezone.utc),
            )
            self.store.insert(product)

        logger.info(f"✅ Product created: id={product.id} sku={product.sku}")
        return product

    def sell(self, payload: Any) -> Dict[str, Any]:
        """
        Sell units of one product.

        Checks run in order and the first failure wins: quantity, productId,
        existence, stock.

        Args:
            payload: Raw body with productId and quantity

        Returns:
            Sale summary with the remaining stock

        Raises:
            AppException: INVALID_QUANTITY, MISSING_FIELD,
                PRODUCT_NOT_FOUND or INSUFFICIENT_STOCK
        """
        data = _as_mapping(payload)
        raw_id = data.get("productId")
        quantity = data.get("quantity")

        is_valid, error = self._quantity_validator.validate(quantity)
        if not is_valid:
            raise exceptions.invalid_quantity(error)

        if raw_id is None:
            raise exceptions.missing_product_id()

        with self.store.lock:
            product = self.store.find_by_id(parse_product_id(raw_id, allow_text=False))
            if product is None:
                raise exceptions.product_not_found(raw_id)

            if product.stock < quantity:
                raise exceptions.insufficient_stock(product.stock)

            product.stock -= quantity
            remaining = product.stock

        logger.info(f"Sold {quantity} x {product.sku} (remaining {remaining})")
        return {
            "message": "Sale completed",
            "product": {
                "id": product.id,
                "name": product.name,
                "sku": product.sku,
                "remainingStock": remaining,
            },
            "soldQuantity": quantity,
        }

    def bulk_price_update(self, payload: Any) -> Dict[str, Any]:
        """
        Overwrite prices for a batch of products.

        Partial success is the normal outcome: each entry succeeds or fails
        on its own and the batch always returns a summary once the
        ``updates`` array itself is acceptable.

        Args:
            payload: Raw body with an ``updates`` array of
                {productId, newPrice} entries

        Returns:
            Summary with per-entry success and failure records

        Raises:
            AppException: INVALID_UPDATES_PAYLOAD if updates is missing,
                not an array, or empty
        """
        updates = _as_mapping(payload).get("updates")

        if not isinstance(updates, list):
            raise exceptions.invalid_updates_payload("updates must be an array")

        if not updates:
            raise exceptions.invalid_updates_payload("updates must contain at least one entry")

        success: List[Dict[str, Any]] = []
        failed: List[Dict[str, Any]] = []

        with self.store.lock:
            for index, entry in enumerate(updates):
                entry = _as_mapping(entry)
                raw_id = entry.get("productId")
                new_price = entry.get("newPrice")

                if raw_id is None:
                    failed.append({"index": index, "productId": raw_id, "reason": "missing productId"})
                    continue

                is_valid, error = self._price_validator.validate(new_price)
                if not is_valid:
                    failed.append({"index": index, "productId": raw_id, "reason": error})
                    continue

                product = self.store.find_by_id(parse_product_id(raw_id, allow_text=False))
                if product is None:
                    failed.append({"index": index, "productId": raw_id, "reason": "not found"})
                    continue

                old_price = product.price
                product.price = new_price
                success.append({
                    "index": index,
                    "productId": product.id,
                    "name": product.name,
                    "sku": product.sku,
                    "oldPrice": old_price,
                    "newPrice": new_price,
                })

        logger.info(
            f"Bulk price update: {len(updates)} entries, "
            f"{len(success)} updated, {len(failed)} failed"
        )
        return {
            "message": "Price update finished",
            "summary": {
                "total": len(updates),
                "successCount": len(success),
                "failedCount": len(failed),
            },
            "results": {
                "success": success,
                "failed": failed,
            },
        }

    # =========================================================================
    # QUERIES
    # =========================================================================

    def list_products(self, category: Optional[str] = None) -> List[Product]:
        """
        List all products, or those in one category.

        An empty or absent filter lists everything; an unknown label is
        rejected rather than answered with an empty list.

        Raises:
            AppException: INVALID_CATEGORY_FILTER
        """
        if not category:
            return self.store.all()

        if not is_allowed_category(category):
            raise exceptions.invalid_category_filter(category, allowed_categories_text())

        return self.store.filter_by_category(category)

    def search(self, keyword: Optional[str]) -> List[Product]:
        """
        Search products by name or sku (case-insensitive substring).

        Raises:
            AppException: MISSING_KEYWORD if keyword is absent or blank
        """
        if not isinstance(keyword, str) or not keyword.strip():
            raise exceptions.missing_keyword()

        return self.store.search_by_keyword(keyword)

    def get_by_id(self, raw_id: Any) -> Product:
        """
        Get product by id.

        Args:
            raw_id: Id as received (path text or number)

        Raises:
            AppException: PRODUCT_NOT_FOUND, also for non-numeric ids
        """
        product = self.store.find_by_id(parse_product_id(raw_id))
        if product is None:
            raise exceptions.product_not_found(raw_id)
        return product

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================

    def get_categories(self) -> List[str]:
        """Get registry labels in order."""
        return list(ALLOWED_CATEGORIES)

    def get_stats(self) -> Dict[str, Any]:
        """Get catalog statistics."""
        products = self.store.all()
        per_category = {label: 0 for label in ALLOWED_CATEGORIES}
        for product in products:
            per_category[product.category] += 1

        return {
            "total_products": len(products),
            "total_stock": sum(p.stock for p in products),
            "categories": per_category,
        }

    def load_seed(self, seed_file: Path) -> int:
        """
        Create products from a JSON array of candidates.

        Invalid entries are logged and skipped.

        Args:
            seed_file: Path to a JSON file holding a list of candidates

        Returns:
            Number of products created
        """
        with seed_file.open("r", encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, list):
            logger.warning(f"Seed file {seed_file} does not hold a JSON array, skipping")
            return 0

        created = 0
        for position, candidate in enumerate(data):
            try:
                self.create(candidate)
                created += 1
            except exceptions.AppException as e:
                logger.warning(f"Skipping seed entry {position}: {e.errors or e.message}")

        logger.info(f"✅ Seeded {created} of {len(data)} products from {seed_file}")
        return created


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

_catalog_instance: Optional[ProductCatalog] = None


def get_catalog() -> ProductCatalog:
    """
    Get the process-wide catalog instance.

    Creates an empty catalog on first use. Used as a FastAPI dependency;
    tests override it with their own instance.
    """
    global _catalog_instance
    if _catalog_instance is None:
        _catalog_instance = ProductCatalog(CatalogStore())
    return _catalog_instance


def init_catalog(seed_file: Optional[Path] = None) -> ProductCatalog:
    """
    Initialize the process-wide catalog instance.

    Args:
        seed_file: Optional JSON file of product candidates

    Returns:
        ProductCatalog instance
    """
    global _catalog_instance
    _catalog_instance = ProductCatalog(CatalogStore())
    if seed_file is not None:
        _catalog_instance.load_seed(seed_file)
    return _catalog_instance
