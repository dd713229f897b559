"""
Catalog API Endpoints.

Categories and departments offered when registering an asset.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel

from services.asset_tracker.dependencies import CurrentProfile, Store


router = APIRouter(tags=["catalog"])


class NamedRecordResponse(BaseModel):
    """Category or department."""

    id: int
    name: str
    created_at: datetime


@router.get(
    "/categories",
    response_model=list[NamedRecordResponse],
    summary="List categories",
)
async def list_categories(profile: CurrentProfile, store: Store) -> list[NamedRecordResponse]:
    """List categories ordered by name."""
    return [NamedRecordResponse(**c) for c in store.list_categories()]


@router.get(
    "/departments",
    response_model=list[NamedRecordResponse],
    summary="List departments",
)
async def list_departments(profile: CurrentProfile, store: Store) -> list[NamedRecordResponse]:
    """List departments ordered by name."""
    return [NamedRecordResponse(**d) for d in store.list_departments()]
