"""Asset tracker API routes."""

from services.asset_tracker.routes.admin import router as admin_router
from services.asset_tracker.routes.assets import router as assets_router
from services.asset_tracker.routes.auth import router as auth_router
from services.asset_tracker.routes.catalog import router as catalog_router
from services.asset_tracker.routes.warranties import router as warranties_router

__all__ = [
    "admin_router",
    "assets_router",
    "auth_router",
    "catalog_router",
    "warranties_router",
]
