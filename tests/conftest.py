"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides a fresh catalog per test and a client bound to it.

==============================================================================
"""

import pytest
from typing import Any, Callable, Dict, Generator
from fastapi.testclient import TestClient

from app.main import app
from app.catalog.catalog import ProductCatalog, get_catalog
from app.catalog.categories import ALLOWED_CATEGORIES
from app.catalog.models import Product
from app.catalog.store import CatalogStore


FOOD, DRINKS, HOUSEHOLD, CLOTHING = ALLOWED_CATEGORIES


# ============================================================================
# CATALOG FIXTURES
# ============================================================================

@pytest.fixture(scope="function")
def store() -> CatalogStore:
    """Create an empty store for each test."""
    return CatalogStore()


@pytest.fixture(scope="function")
def catalog(store: CatalogStore) -> ProductCatalog:
    """Create a catalog over the test store."""
    return ProductCatalog(store)


@pytest.fixture(scope="function")
def client(catalog: ProductCatalog) -> Generator[TestClient, None, None]:
    """Create test client with catalog override."""
    app.dependency_overrides[get_catalog] = lambda: catalog
    
    with TestClient(app) as test_client:
        yield test_client
    
    app.dependency_overrides.clear()


# ============================================================================
# PRODUCT FIXTURES
# ============================================================================

@pytest.fixture
def product_data() -> Callable[..., Dict[str, Any]]:
    """Build a valid product payload, with overrides."""
    def _build(**overrides: Any) -> Dict[str, Any]:
        data = {
            "name": "Jasmine Rice 5kg",
            "sku": "RICE-005",
            "price": 189,
            "stock": 20,
            "category": FOOD,
        }
        data.update(overrides)
        return data
    return _build


@pytest.fixture
def rice(catalog: ProductCatalog, product_data) -> Product:
    """A stored food product with 20 units."""
    return catalog.create(product_data())


@pytest.fixture
def cola(catalog: ProductCatalog, product_data) -> Product:
    """A stored drink product with 3 units."""
    return catalog.create(product_data(name="Cola Can", sku="COLA-330", price=15, stock=3, category=DRINKS))
