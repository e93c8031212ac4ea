"""
==============================================================================
Schemas Package - Pydantic Models
==============================================================================

Response schemas using Pydantic.

This package provides:
- Common: Shared base and response wrappers
- Product: Sale and bulk price update results

==============================================================================
"""

from .common import CamelModel, SuccessResponse
from .product import (
    SoldProduct,
    SaleResponse,
    PriceUpdateSuccess,
    PriceUpdateFailure,
    BulkPriceUpdateSummary,
    BulkPriceUpdateResults,
    BulkPriceUpdateResponse,
)

__all__ = [
    # Common
    "CamelModel",
    "SuccessResponse",
    # Product
    "SoldProduct",
    "SaleResponse",
    "PriceUpdateSuccess",
    "PriceUpdateFailure",
    "BulkPriceUpdateSummary",
    "BulkPriceUpdateResults",
    "BulkPriceUpdateResponse",
]
