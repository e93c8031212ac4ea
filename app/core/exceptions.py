"""
Application Exception Handling

Single AppException class for all catalog errors with FastAPI integration.
"""

from datetime import datetime, timezone
import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


# Module logger
logger = logging.getLogger(__name__)


class AppException(Exception):
    """
    Unified application exception for all error scenarios.
    
    Provides consistent error response format across the entire API.
    Every catalog error is a user-input error; none is retried.
    
    Usage:
        raise AppException("Product not found", "PRODUCT_NOT_FOUND", 404)
        raise AppException("Invalid product", "VALIDATION_ERROR", 400, errors=[...])
    
    Error Codes:
        Create:
            - VALIDATION_ERROR (400)
        
        Sell:
            - INVALID_QUANTITY (400)
            - MISSING_FIELD (400)
            - PRODUCT_NOT_FOUND (404)
            - INSUFFICIENT_STOCK (400)
        
        Bulk price update:
            - INVALID_UPDATES_PAYLOAD (400)
        
        Queries:
            - INVALID_CATEGORY_FILTER (400)
            - MISSING_KEYWORD (400)
            - PRODUCT_NOT_FOUND (404)
        
        General:
            - MALFORMED_REQUEST (400)
    """
    
    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None,
        errors: Optional[List[str]] = None
    ):
        """
        Initialize application exception.
        
        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "PRODUCT_NOT_FOUND")
            status_code: HTTP status code (default: 400)
            details: Additional error context (optional)
            errors: Field-level messages, reported together (optional)
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.errors = list(errors or [])
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        error_dict: Dict[str, Any] = {
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "timestamp": self.timestamp
            }
        }
        
        if self.details:
            error_dict["error"]["details"] = self.details
        
        if self.errors:
            error_dict["errors"] = self.errors
        
        return error_dict


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    FastAPI exception handler for AppException.
    
    Converts AppException to consistent JSON error response.
    """
    logger.debug(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report unparseable request bodies in the AppException format."""
    return await app_exception_handler(request, malformed_request(jsonable_encoder(exc.errors())))


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with FastAPI app.
    
    Call this in main.py after creating the FastAPI instance.
    
    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)


# ============================================
# CONVENIENCE FACTORY FUNCTIONS
# ============================================

def validation_error(errors: List[str]) -> AppException:
    """Create product validation exception carrying every field message."""
    return AppException("Invalid product data", "VALIDATION_ERROR", 400, errors=errors)


def missing_product_id() -> AppException:
    """Create missing productId exception."""
    return AppException(
        "productId is required",
        "MISSING_FIELD",
        400,
        {"field": "productId"}
    )


def invalid_quantity(message: str = "Quantity must be greater than 0") -> AppException:
    """Create invalid sale quantity exception."""
    return AppException(message, "INVALID_QUANTITY", 400)


def product_not_found(product_id: Any = None) -> AppException:
    """Create product not found exception."""
    details = {"product_id": product_id} if product_id is not None else {}
    return AppException("Product not found", "PRODUCT_NOT_FOUND", 404, details)


def insufficient_stock(available: Any) -> AppException:
    """Create insufficient stock exception reporting the units on hand."""
    return AppException(
        f"Insufficient stock (only {available} available)",
        "INSUFFICIENT_STOCK",
        400,
        {"available": available}
    )


def invalid_category_filter(category: str, allowed: str) -> AppException:
    """Create unknown category filter exception naming the legal set."""
    return AppException(
        f"Invalid category, must be one of: {allowed}",
        "INVALID_CATEGORY_FILTER",
        400,
        {"category": category}
    )


def missing_keyword() -> AppException:
    """Create missing search keyword exception."""
    return AppException("Search keyword is required", "MISSING_KEYWORD", 400)


def invalid_updates_payload(message: str) -> AppException:
    """Create invalid bulk updates envelope exception."""
    return AppException(message, "INVALID_UPDATES_PAYLOAD", 400)


def malformed_request(problems: Optional[List[Any]] = None) -> AppException:
    """Create malformed request body exception."""
    details = {"problems": problems} if problems else {}
    return AppException("Malformed request body", "MALFORMED_REQUEST", 400, details)
