"""
FastAPI dependencies for the asset tracker service.

Roles are re-derived from the profile store on every request, so a role
change takes effect immediately, whatever tokens are outstanding.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import Depends, HTTPException, status

from shared.auth import User, get_current_active_user
from shared.logging import bind_context, get_logger
from services.asset_tracker.store import AssetTrackerStore, Role, get_store
from services.asset_tracker.warranty import WarrantyServiceClient, WarrantyStatusCache


logger = get_logger(__name__)


async def get_current_profile(
    user: Annotated[User, Depends(get_current_active_user)],
    store: Annotated[AssetTrackerStore, Depends(get_store)],
) -> dict[str, Any]:
    """Profile of the authenticated user, provisioned on first sight."""
    profile = store.ensure_profile(user.id, user.email)
    bind_context(user_id=profile["id"])
    return profile


async def require_admin(
    profile: Annotated[dict[str, Any], Depends(get_current_profile)],
) -> dict[str, Any]:
    """
    Require the administrator role.

    Raises:
        HTTPException: 403 if the profile is not an administrator
    """
    if profile["role"] != Role.ADMIN.value:
        logger.warning("insufficient_role", user_id=profile["id"], role=profile["role"])
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions",
        )
    return profile


CurrentProfile = Annotated[dict[str, Any], Depends(get_current_profile)]
AdminProfile = Annotated[dict[str, Any], Depends(require_admin)]
Store = Annotated[AssetTrackerStore, Depends(get_store)]


# ----------------------------------------------------------------------
# Warranty service
# ----------------------------------------------------------------------

_warranty_client: WarrantyServiceClient | None = None


def get_warranty_client() -> WarrantyServiceClient:
    """Process-wide warranty service client."""
    global _warranty_client
    if _warranty_client is None:
        _warranty_client = WarrantyServiceClient()
    return _warranty_client


async def close_warranty_client() -> None:
    """Release the warranty client's connections."""
    global _warranty_client
    if _warranty_client is not None:
        await _warranty_client.close()
        _warranty_client = None


class WarrantyCacheRegistry:
    """One status cache per user, each owned by that user's view."""

    def __init__(self) -> None:
        self._caches: dict[str, WarrantyStatusCache] = {}

    def for_user(self, user_id: str, client: WarrantyServiceClient) -> WarrantyStatusCache:
        cache = self._caches.get(user_id)
        if cache is None or cache.client is not client:
            cache = WarrantyStatusCache(client)
            self._caches[user_id] = cache
        return cache

    def clear(self) -> None:
        self._caches.clear()


cache_registry = WarrantyCacheRegistry()


def get_cache_registry() -> WarrantyCacheRegistry:
    return cache_registry


WarrantyClient = Annotated[WarrantyServiceClient, Depends(get_warranty_client)]
CacheRegistry = Annotated[WarrantyCacheRegistry, Depends(get_cache_registry)]
