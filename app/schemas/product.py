"""
==============================================================================
Product Schemas Module
==============================================================================

Response schemas for the sale and bulk price update endpoints.

Request bodies are accepted as raw JSON and checked by the catalog
validators, so malformed values come back as catalog errors instead of
framework validation errors.

==============================================================================
"""

from typing import Any, List, Union
from pydantic import Field

from .common import CamelModel


Number = Union[int, float]


# =============================================================================
# SALE
# =============================================================================

class SoldProduct(CamelModel):
    """Product state after a sale."""
    id: int
    name: str
    sku: str
    remaining_stock: Number


class SaleResponse(CamelModel):
    """Result of POST /products/sell."""
    message: str
    product: SoldProduct
    sold_quantity: Number


# =============================================================================
# BULK PRICE UPDATE
# =============================================================================

class PriceUpdateSuccess(CamelModel):
    """One applied price change; ``index`` is the entry's input position."""
    index: int = Field(..., ge=0)
    product_id: int
    name: str
    sku: str
    old_price: Number
    new_price: Number


class PriceUpdateFailure(CamelModel):
    """One rejected entry; ``product_id`` echoes whatever was sent."""
    index: int = Field(..., ge=0)
    product_id: Any = None
    reason: str


class BulkPriceUpdateSummary(CamelModel):
    total: int = Field(..., ge=1)
    success_count: int = Field(..., ge=0)
    failed_count: int = Field(..., ge=0)


class BulkPriceUpdateResults(CamelModel):
    success: List[PriceUpdateSuccess]
    failed: List[PriceUpdateFailure]


class BulkPriceUpdateResponse(CamelModel):
    """Result of PUT /products/bulk-price-update."""
    message: str
    summary: BulkPriceUpdateSummary
    results: BulkPriceUpdateResults
