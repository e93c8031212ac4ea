"""
==============================================================================
Health Check Endpoints
==============================================================================

System health status endpoints for monitoring and orchestration.

==============================================================================
"""

from fastapi import APIRouter, Depends

from app.catalog.catalog import ProductCatalog, get_catalog


router = APIRouter(prefix="/health", tags=["Health"])


class HealthController:
    """Controller for health check operations."""
    
    def __init__(self, catalog: ProductCatalog):
        self._catalog = catalog
    
    def check_catalog(self) -> dict:
        """Check catalog status."""
        return {"status": "healthy", "products": self._catalog.store.count()}
    
    def get_health(self) -> dict:
        """Get full health status."""
        catalog_info = self.check_catalog()
        
        return {
            "status": "healthy",
            "components": {
                "api": "healthy",
                "catalog": catalog_info["status"]
            },
            "details": {
                "products_loaded": catalog_info["products"]
            }
        }


@router.get("")
async def health_check(catalog: ProductCatalog = Depends(get_catalog)):
    """
    Health check endpoint.
    
    Returns system status including API and catalog.
    """
    controller = HealthController(catalog)
    return controller.get_health()


@router.get("/ready")
async def readiness_check():
    """Readiness probe for container orchestration."""
    return {"ready": True}


@router.get("/live")
async def liveness_check():
    """Liveness probe for container orchestration."""
    return {"alive": True}
