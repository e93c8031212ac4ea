"""
==============================================================================
Catalog Package - Product Management
==============================================================================

In-memory product catalog with validation, sales and bulk price updates.

Classes:
--------
- Product: Pydantic model for products
- CatalogStore: In-memory product collection and id sequence
- ProductValidator: Field rules for product candidates
- ProductCatalog: Catalog operations (create, sell, bulk update, queries)

==============================================================================
"""

from .categories import ALLOWED_CATEGORIES, is_allowed_category
from .models import Product
from .store import CatalogStore
from .validation import ProductValidator, QuantityValidator, PriceValidator, parse_product_id
from .catalog import ProductCatalog, get_catalog, init_catalog

__all__ = [
    "ALLOWED_CATEGORIES",
    "is_allowed_category",
    "Product",
    "CatalogStore",
    "ProductValidator",
    "QuantityValidator",
    "PriceValidator",
    "parse_product_id",
    "ProductCatalog",
    "get_catalog",
    "init_catalog",
]
