"""
==============================================================================
Main API Router
==============================================================================

Combines all v1 API routes under the configured prefix.

==============================================================================
"""

from fastapi import APIRouter

from app.api.v1 import health, products


class MainAPIRouter:
    """
    Main API router combining all versioned routes.
    
    Provides a single entry point for all API endpoints.
    """
    
    def __init__(self, prefix: str = ""):
        """Initialize the main router with all sub-routers."""
        self._router = APIRouter(prefix=prefix)
        self._include_routers()
    
    def _include_routers(self) -> None:
        """Include all v1 routers."""
        self._router.include_router(health.router)
        self._router.include_router(products.router)
    
    @property
    def router(self):
        """Get the FastAPI router instance."""
        return self._router


def build_api_router(prefix: str = "") -> APIRouter:
    """Create the main API router mounted at ``prefix``."""
    return MainAPIRouter(prefix).router
