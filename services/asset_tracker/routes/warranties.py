"""
Warranty API Endpoints.

Per-asset warranty badges and registration with the remote warranty
service. Each user's requests share one status cache, standing in for
the asset list view that owns it.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, Field

from shared.logging import get_logger
from shared.models import ErrorResponse
from services.asset_tracker.dependencies import CacheRegistry, CurrentProfile, Store, WarrantyClient
from services.asset_tracker.routes.assets import visible_asset
from services.asset_tracker.store import Role
from services.asset_tracker.warranty import (
    RegistrationAction,
    RegistrationResult,
    WarrantyBadge,
    WarrantyStatus,
    WarrantyStatusCache,
    classify_warranty_status,
)


logger = get_logger(__name__)

router = APIRouter(prefix="/warranties", tags=["warranties"])


class AssetScope(str, Enum):
    """Which assets a status listing covers."""

    OWN = "own"
    ALL = "all"


class AssetWarrantyView(BaseModel):
    """Warranty badge of one asset."""

    asset_id: int
    asset_name: str
    badge: WarrantyBadge
    label: str
    days_until_expiry: int | None = None
    offers_registration: bool
    status: WarrantyStatus | None = None

    @classmethod
    def build(
        cls,
        asset: dict[str, Any],
        warranty_status: WarrantyStatus | None,
        loading: bool = False,
    ) -> AssetWarrantyView:
        view = classify_warranty_status(warranty_status, loading=loading)
        return cls(
            asset_id=asset["id"],
            asset_name=asset["name"],
            badge=view.badge,
            label=view.label,
            days_until_expiry=view.days_until_expiry,
            offers_registration=view.offers_registration,
            status=warranty_status,
        )


class WarrantyStatusList(BaseModel):
    """Badges for every asset in a view."""

    items: list[AssetWarrantyView]
    total: int
    failed: int = Field(description="Assets whose status could not be checked")


class RegisterWarrantyRequest(BaseModel):
    """Request to register warranty coverage."""

    warranty_duration_months: int = Field(default=12, ge=1, le=120)


class RegisterWarrantyResponse(BaseModel):
    """Accepted registration."""

    result: RegistrationResult
    recovered_duplicate: bool = Field(
        description="The service reported the asset as already registered",
    )
    warranty: AssetWarrantyView


def _acting_user(profile: dict[str, Any]) -> dict[str, Any]:
    return {"id": profile["id"], "full_name": profile["full_name"]}


@router.get(
    "/status",
    response_model=WarrantyStatusList,
    summary="Warranty badges for my asset list",
)
async def list_warranty_statuses(
    profile: CurrentProfile,
    store: Store,
    client: WarrantyClient,
    caches: CacheRegistry,
    scope: AssetScope = Query(AssetScope.OWN),
) -> WarrantyStatusList:
    """
    Reload the asset list and refresh every warranty status.

    Administrators may pass ``scope=all`` to cover every asset.
    """
    if scope is AssetScope.ALL and profile["role"] != Role.ADMIN.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions",
        )

    created_by = None if scope is AssetScope.ALL else profile["id"]
    assets = store.list_assets(created_by=created_by)

    cache = caches.for_user(profile["id"], client)
    statuses = await cache.refresh(a["id"] for a in assets)

    items = [AssetWarrantyView.build(a, statuses.get(str(a["id"]))) for a in assets]
    return WarrantyStatusList(
        items=items,
        total=len(items),
        failed=sum(1 for item in items if item.badge is WarrantyBadge.UNKNOWN),
    )


@router.get(
    "/status/{asset_id}",
    response_model=AssetWarrantyView,
    summary="Warranty badge for one asset",
)
async def get_warranty_status(
    asset_id: int,
    profile: CurrentProfile,
    store: Store,
    client: WarrantyClient,
) -> AssetWarrantyView:
    """Check one asset's warranty with the remote service."""
    asset = visible_asset(store, profile, asset_id)
    warranty_status = await client.check_warranty_status(asset_id)
    return AssetWarrantyView.build(asset, warranty_status)


@router.post(
    "/register/{asset_id}",
    response_model=RegisterWarrantyResponse,
    summary="Register warranty coverage for an asset",
    responses={
        422: {"model": ErrorResponse, "description": "Rejected by the warranty service"},
        502: {"model": ErrorResponse, "description": "Warranty service unreachable"},
    },
)
async def register_warranty(
    asset_id: int,
    profile: CurrentProfile,
    store: Store,
    client: WarrantyClient,
    caches: CacheRegistry,
    request: RegisterWarrantyRequest | None = None,
) -> RegisterWarrantyResponse:
    """
    Register coverage with the remote warranty service.

    An asset the service already holds a warranty for counts as registered.
    """
    asset = visible_asset(store, profile, asset_id)
    duration = (request or RegisterWarrantyRequest()).warranty_duration_months

    cache: WarrantyStatusCache = caches.for_user(profile["id"], client)
    action = RegistrationAction(client, cache)
    outcome = await action.submit(asset, _acting_user(profile), warranty_duration_months=duration)

    if not outcome.accepted:
        result = outcome.result
        error = ErrorResponse(
            error=result.error or outcome.error_message or "registration_failed",
            message=outcome.error_message,
            details=result.details,
        )
        raise HTTPException(
            status_code=(
                status.HTTP_422_UNPROCESSABLE_ENTITY
                if result.details
                else status.HTTP_502_BAD_GATEWAY
            ),
            detail=error.model_dump(mode="json"),
        )

    return RegisterWarrantyResponse(
        result=outcome.result,
        recovered_duplicate=outcome.recovered_duplicate,
        warranty=AssetWarrantyView.build(asset, cache.get(asset_id)),
    )
