"""
==============================================================================
Product Catalog Endpoints
==============================================================================

Endpoints for creating, browsing, searching, selling and repricing
products.

Literal paths (/search, /sell, /bulk-price-update, /categories, /stats)
are registered before the /{product_id} pattern so they are never
shadowed by it.

==============================================================================
"""

from typing import Any, List, Optional
from fastapi import APIRouter, Body, Depends, Query, status

from app.catalog.catalog import ProductCatalog, get_catalog
from app.catalog.models import Product
from app.schemas import BulkPriceUpdateResponse, SaleResponse, SuccessResponse


router = APIRouter(prefix="/products", tags=["Products"])


class ProductController:
    """Controller for product catalog operations."""
    
    def __init__(self, catalog: ProductCatalog):
        self._catalog = catalog
    
    def create(self, payload: Any) -> Product:
        """Create a product."""
        return self._catalog.create(payload)
    
    def list_products(self, category: Optional[str]) -> List[Product]:
        """List products with optional category filter."""
        return self._catalog.list_products(category)
    
    def search(self, keyword: Optional[str]) -> List[Product]:
        """Search products."""
        return self._catalog.search(keyword)
    
    def sell(self, payload: Any) -> dict:
        """Sell units of a product."""
        return self._catalog.sell(payload)
    
    def bulk_price_update(self, payload: Any) -> dict:
        """Apply a batch of price changes."""
        return self._catalog.bulk_price_update(payload)
    
    def get_categories(self) -> SuccessResponse:
        """Get allowed categories."""
        return SuccessResponse(data={"categories": self._catalog.get_categories()})
    
    def get_stats(self) -> SuccessResponse:
        """Get catalog statistics."""
        return SuccessResponse(data=self._catalog.get_stats())
    
    def get_by_id(self, product_id: str) -> Product:
        """Get product by id."""
        return self._catalog.get_by_id(product_id)


def get_controller(catalog: ProductCatalog = Depends(get_catalog)) -> ProductController:
    """FastAPI dependency building a controller over the active catalog."""
    return ProductController(catalog)


@router.post("", response_model=Product, status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: Any = Body(None),
    controller: ProductController = Depends(get_controller)
):
    """Create a product; every invalid field is reported."""
    return controller.create(payload)


@router.get("", response_model=List[Product])
async def list_products(
    category: Optional[str] = Query(None),
    controller: ProductController = Depends(get_controller)
):
    """List all products, or the products in one category."""
    return controller.list_products(category)


@router.get("/search", response_model=List[Product])
async def search_products(
    keyword: Optional[str] = Query(None),
    controller: ProductController = Depends(get_controller)
):
    """Search products by name or sku."""
    return controller.search(keyword)


@router.post("/sell", response_model=SaleResponse)
async def sell_product(
    payload: Any = Body(None),
    controller: ProductController = Depends(get_controller)
):
    """Sell units of a product, decrementing its stock."""
    return controller.sell(payload)


@router.put("/bulk-price-update", response_model=BulkPriceUpdateResponse)
async def bulk_price_update(
    payload: Any = Body(None),
    controller: ProductController = Depends(get_controller)
):
    """Update prices for many products; entries succeed or fail individually."""
    return controller.bulk_price_update(payload)


@router.get("/categories", response_model=SuccessResponse)
async def get_categories(controller: ProductController = Depends(get_controller)):
    """Get the allowed category labels."""
    return controller.get_categories()


@router.get("/stats", response_model=SuccessResponse)
async def get_catalog_stats(controller: ProductController = Depends(get_controller)):
    """Get catalog statistics."""
    return controller.get_stats()


@router.get("/{product_id}", response_model=Product)
async def get_product(
    product_id: str,
    controller: ProductController = Depends(get_controller)
):
    """Get product by id."""
    return controller.get_by_id(product_id)
