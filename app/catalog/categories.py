"""
==============================================================================
Category Registry Module
==============================================================================

Fixed, closed set of category labels a product may belong to.

Labels (wire values, kept verbatim):
-----------------------------------
- อาหาร        food
- เครื่องดื่ม    beverages
- ของใช้        household goods
- เสื้อผ้า       clothing

The registry is static for the lifetime of the process.

==============================================================================
"""

from typing import Any, Tuple


ALLOWED_CATEGORIES: Tuple[str, ...] = (
    "อาหาร",
    "เครื่องดื่ม",
    "ของใช้",
    "เสื้อผ้า",
)


def is_allowed_category(value: Any) -> bool:
    """Check whether a value is one of the registry labels."""
    return isinstance(value, str) and value in ALLOWED_CATEGORIES


def allowed_categories_text() -> str:
    """Registry labels joined for use in error messages."""
    return ", ".join(ALLOWED_CATEGORIES)
