"""
Asset API Endpoints.

The signed-in user's own assets: listing, summary and registration.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, Field, field_validator

from services.asset_tracker.dependencies import CurrentProfile, Store
from services.asset_tracker.store import (
    AssetTrackerStore,
    RecordNotFoundError,
    Role,
    filter_assets,
    total_value,
)


router = APIRouter(prefix="/assets", tags=["assets"])


class AssetCreate(BaseModel):
    """Request to register a new asset."""

    name: str = Field(..., min_length=1, max_length=200)
    category_id: int | None = None
    department_id: int | None = None
    cost: float = Field(..., ge=0)
    date_purchased: date | None = None
    serial_number: str | None = Field(default=None, max_length=100)
    manufacturer: str | None = Field(default=None, max_length=200)
    model_number: str | None = Field(default=None, max_length=100)

    @field_validator("category_id", "department_id", "date_purchased", mode="before")
    @classmethod
    def empty_to_none(cls, v: Any) -> Any:
        """Forms submit unselected references as empty strings."""
        return None if v == "" else v


class AssetResponse(BaseModel):
    """Asset record response."""

    id: int
    name: str
    category_id: int | None
    category_name: str | None
    department_id: int | None
    department_name: str | None
    cost: float
    date_purchased: date | None
    created_by: str
    created_by_name: str | None
    created_at: datetime
    serial_number: str | None
    manufacturer: str | None
    model_number: str | None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> AssetResponse:
        """Create response from a joined asset row."""
        category = row.get("categories")
        department = row.get("departments")
        profile = row.get("profiles")
        return cls(
            id=row["id"],
            name=row["name"],
            category_id=row["category_id"],
            category_name=category["name"] if category else None,
            department_id=row["department_id"],
            department_name=department["name"] if department else None,
            cost=row["cost"],
            date_purchased=row["date_purchased"],
            created_by=row["created_by"],
            created_by_name=profile["full_name"] if profile else None,
            created_at=row["created_at"],
            serial_number=row["serial_number"],
            manufacturer=row["manufacturer"],
            model_number=row["model_number"],
        )


class AssetSummary(BaseModel):
    """Totals over a list of assets."""

    count: int
    total_value: float
    average_value: float

    @classmethod
    def from_rows(cls, rows: list[dict[str, Any]]) -> AssetSummary:
        total = total_value(rows)
        return cls(
            count=len(rows),
            total_value=total,
            average_value=total / len(rows) if rows else 0.0,
        )


def visible_asset(store: AssetTrackerStore, profile: dict[str, Any], asset_id: int) -> dict[str, Any]:
    """
    Get an asset the profile may see: its own, or any for administrators.

    Raises:
        HTTPException: 404 if the asset does not exist or is not visible
    """
    asset = store.get_asset(asset_id)
    if asset is None or (
        profile["role"] != Role.ADMIN.value and asset["created_by"] != profile["id"]
    ):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Asset {asset_id} not found",
        )
    return asset


@router.get(
    "/",
    response_model=list[AssetResponse],
    summary="List my assets",
)
async def list_my_assets(
    profile: CurrentProfile,
    store: Store,
    search: str | None = Query(None, max_length=200),
    category_id: int | None = Query(None),
) -> list[AssetResponse]:
    """List the current user's assets, newest first."""
    rows = filter_assets(store.list_assets(created_by=profile["id"]), search, category_id)
    return [AssetResponse.from_row(r) for r in rows]


@router.get(
    "/summary",
    response_model=AssetSummary,
    summary="Summarize my assets",
)
async def summarize_my_assets(
    profile: CurrentProfile,
    store: Store,
    search: str | None = Query(None, max_length=200),
    category_id: int | None = Query(None),
) -> AssetSummary:
    """Count, total and average value of the current user's assets."""
    rows = filter_assets(store.list_assets(created_by=profile["id"]), search, category_id)
    return AssetSummary.from_rows(rows)


@router.post(
    "/",
    response_model=AssetResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new asset",
)
async def create_asset(asset: AssetCreate, profile: CurrentProfile, store: Store) -> AssetResponse:
    """Register a new asset owned by the current user."""
    try:
        row = store.create_asset(created_by=profile["id"], **asset.model_dump())
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    return AssetResponse.from_row(row)


@router.get(
    "/{asset_id}",
    response_model=AssetResponse,
    summary="Get asset by ID",
)
async def get_asset(asset_id: int, profile: CurrentProfile, store: Store) -> AssetResponse:
    """Get a specific asset."""
    return AssetResponse.from_row(visible_asset(store, profile, asset_id))
