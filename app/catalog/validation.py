"""
==============================================================================
Product Validation Module
==============================================================================

Validation rules for catalog writes.

This module implements:
- ProductValidator: Field rules for a product candidate (collects all errors)
- QuantityValidator: Sale quantity rule
- PriceValidator: Bulk update price rule
- parse_product_id: Explicit id parsing with a ``None`` failure result

None of these raise on malformed input. Wrong types are reported as
validation failures.

Product Rules (evaluated in this order, all collected):
------------------------------------------------------
1. name      required, non-blank text
2. sku       required, non-blank text, at least 3 characters,
             unique among stored products (create only)
3. price     required, number greater than 0
4. stock     required, number not below 0
5. category  required, one of the registry labels

==============================================================================
"""

from __future__ import annotations

import math
import re
from typing import Any, Callable, List, Mapping, Optional, Tuple

from .categories import allowed_categories_text, is_allowed_category


_MISSING = object()

_INT_TEXT = re.compile(r"^[+-]?\d+$")


def is_number(value: Any) -> bool:
    """True for finite int/float values; bool is not a number here."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    return False


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or value.strip() == ""


def parse_product_id(value: Any, allow_text: bool = True) -> Optional[int]:
    """
    Parse a product id from a request body value or a path segment.

    JSON bodies carry ids as numbers, so a digit string from a body does
    not name a product (``allow_text=False``).

    Args:
        value: Raw id (int, integral float, or digit string)
        allow_text: Accept digit strings (path segments)

    Returns:
        The integer id, or None when the value cannot name a product

    Example:
        >>> parse_product_id("12")
        12
        >>> parse_product_id("abc") is None
        True
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) and value.is_integer() else None
    if isinstance(value, str) and allow_text:
        text = value.strip()
        if _INT_TEXT.match(text):
            return int(text)
    return None


class ProductValidator:
    """
    Validator for product candidates.

    Every rule runs; the result is the ordered list of messages, empty when
    the candidate is admissible.

    Attributes:
        _sku_lookup: Callable returning an existing product for a sku, or None

    Example:
        >>> validator = ProductValidator(store.find_by_sku)
        >>> validator.validate({"name": "", "sku": "ab"})
        ['Product name must not be empty', 'SKU must be at least 3 characters', ...]
    """

    SKU_MIN_LENGTH = 3

    def __init__(self, sku_lookup: Optional[Callable[[str], Any]] = None) -> None:
        self._sku_lookup = sku_lookup

    def validate(self, candidate: Any, is_update: bool = False) -> List[str]:
        """
        Validate a product candidate.

        Args:
            candidate: Mapping of raw field values (anything else counts as empty)
            is_update: Skip the sku uniqueness rule when True

        Returns:
            Ordered list of error messages
        """
        data: Mapping[str, Any] = candidate if isinstance(candidate, Mapping) else {}
        errors: List[str] = []

        if _is_blank(data.get("name")):
            errors.append("Product name must not be empty")

        sku = data.get("sku")
        if _is_blank(sku):
            errors.append("SKU must not be empty")
        elif len(sku.strip()) < self.SKU_MIN_LENGTH:
            errors.append(f"SKU must be at least {self.SKU_MIN_LENGTH} characters")
        elif not is_update and self._sku_taken(sku.strip()):
            errors.append("SKU already exists")

        price = data.get("price", _MISSING)
        if price is _MISSING or price is None:
            errors.append("Price is required")
        elif not is_number(price) or price <= 0:
            errors.append("Price must be greater than 0")

        stock = data.get("stock", _MISSING)
        if stock is _MISSING or stock is None:
            errors.append("Stock is required")
        elif not is_number(stock) or stock < 0:
            errors.append("Stock must not be negative")

        category = data.get("category")
        if _is_blank(category):
            errors.append("Category must not be empty")
        elif not is_allowed_category(category.strip()):
            errors.append(f"Category must be one of: {allowed_categories_text()}")

        return errors

    def _sku_taken(self, sku: str) -> bool:
        if self._sku_lookup is None:
            return False
        return self._sku_lookup(sku) is not None


class QuantityValidator:
    """
    Validator for sale quantities.
    """

    def validate(self, qty: Any) -> Tuple[bool, Optional[str]]:
        """
        Validate a sale quantity.

        Args:
            qty: Raw quantity

        Returns:
            Tuple of (is_valid, error_message)
        """
        if not is_number(qty) or qty <= 0:
            return False, "Quantity must be greater than 0"
        return True, None


class PriceValidator:
    """
    Validator for a replacement price in a bulk update entry.
    """

    def validate(self, price: Any) -> Tuple[bool, Optional[str]]:
        """Validate a new price; returns (is_valid, error_message)."""
        if not is_number(price) or price <= 0:
            return False, "invalid newPrice"
        return True, None
