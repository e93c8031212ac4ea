"""
==============================================================================
Product Models Module
==============================================================================

Pydantic models for catalog products.

Field names are snake_case in Python and camelCase on the wire
(``created_at`` <-> ``createdAt``).

==============================================================================
"""

from datetime import datetime, timezone
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel


Number = Union[int, float]


class Product(BaseModel):
    """
    Product record owned by the catalog store.

    ``id`` and ``created_at`` are assigned once at creation. ``stock`` is
    changed only by a sale and ``price`` only by a bulk price update.

    Attributes:
        id: Store-assigned identifier
        name: Trimmed display name
        sku: Trimmed stock-keeping unit code
        price: Unit price, always greater than 0
        stock: Units on hand, never negative
        category: One of the registry labels
        created_at: UTC creation timestamp
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: int = Field(..., ge=1, description="Product identifier")
    name: str = Field(..., min_length=1, description="Product name")
    sku: str = Field(..., min_length=3, description="Stock-keeping unit")
    price: Number = Field(..., description="Unit price")
    stock: Number = Field(..., description="Units in stock")
    category: str = Field(..., description="Category label")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp"
    )

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        # Millisecond precision with a trailing Z
        return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
