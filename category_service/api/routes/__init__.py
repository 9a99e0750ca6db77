"""API routes module."""

from category_service.api.routes.categories import router as categories_router
from category_service.api.routes.health import router as health_router
from category_service.api.routes.tags import router as tags_router

__all__ = ["categories_router", "health_router", "tags_router"]
