"""
Administration API Endpoints.

System-wide assets, catalog maintenance and user management. Every route
requires the administrator role.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, Response, status
from pydantic import BaseModel, Field

from shared.auth import MAX_PASSWORD_BYTES, hash_password
from services.asset_tracker.dependencies import AdminProfile, Store
from services.asset_tracker.routes.assets import AssetResponse
from services.asset_tracker.routes.auth import ProfileResponse
from services.asset_tracker.routes.catalog import NamedRecordResponse
from services.asset_tracker.store import (
    ConflictError,
    RecordNotFoundError,
    Role,
    filter_assets,
    total_value,
)


router = APIRouter(prefix="/admin", tags=["admin"])

RECENT_ASSETS_LIMIT = 5


class AdminStats(BaseModel):
    """System-wide counts."""

    total_users: int
    total_assets: int
    total_categories: int
    total_departments: int
    total_value: float
    recent_assets: list[AssetResponse]


class NamedRecordCreate(BaseModel):
    """Request to create a category or department."""

    name: str = Field(..., min_length=1, max_length=100)


class UserCreate(BaseModel):
    """Request to create a user."""

    email: str = Field(..., min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=8, max_length=MAX_PASSWORD_BYTES)
    full_name: str = Field(..., min_length=1, max_length=200)
    role: Role = Role.USER
    department_id: int | None = None


class RoleUpdate(BaseModel):
    """Request to change a user's role."""

    role: Role


def _not_found(e: RecordNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def _conflict(e: ConflictError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get(
    "/stats",
    response_model=AdminStats,
    summary="System statistics",
)
async def get_stats(admin: AdminProfile, store: Store) -> AdminStats:
    """Counts, total asset value and the most recent assets."""
    counts = store.counts()
    assets = store.list_assets()
    return AdminStats(
        total_users=counts["users"],
        total_assets=counts["assets"],
        total_categories=counts["categories"],
        total_departments=counts["departments"],
        total_value=total_value(assets),
        recent_assets=[AssetResponse.from_row(a) for a in assets[:RECENT_ASSETS_LIMIT]],
    )


# ----------------------------------------------------------------------
# Assets
# ----------------------------------------------------------------------


@router.get(
    "/assets",
    response_model=list[AssetResponse],
    summary="List all assets",
)
async def list_all_assets(
    admin: AdminProfile,
    store: Store,
    search: str | None = Query(None, max_length=200),
    category_id: int | None = Query(None),
    department_id: int | None = Query(None),
) -> list[AssetResponse]:
    """List every asset in the system, newest first."""
    rows = filter_assets(store.list_assets(), search, category_id, department_id)
    return [AssetResponse.from_row(r) for r in rows]


@router.delete(
    "/assets/{asset_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an asset",
)
async def delete_asset(asset_id: int, admin: AdminProfile, store: Store) -> Response:
    """Delete any asset."""
    try:
        store.delete_asset(asset_id)
    except RecordNotFoundError as e:
        raise _not_found(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ----------------------------------------------------------------------
# Categories and departments
# ----------------------------------------------------------------------


@router.post(
    "/categories",
    response_model=NamedRecordResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
)
async def create_category(
    request: NamedRecordCreate,
    admin: AdminProfile,
    store: Store,
) -> NamedRecordResponse:
    try:
        return NamedRecordResponse(**store.create_category(request.name))
    except ConflictError as e:
        raise _conflict(e) from e


@router.delete(
    "/categories/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a category",
)
async def delete_category(category_id: int, admin: AdminProfile, store: Store) -> Response:
    """Delete a category no asset refers to."""
    try:
        store.delete_category(category_id)
    except RecordNotFoundError as e:
        raise _not_found(e) from e
    except ConflictError as e:
        raise _conflict(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/departments",
    response_model=NamedRecordResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a department",
)
async def create_department(
    request: NamedRecordCreate,
    admin: AdminProfile,
    store: Store,
) -> NamedRecordResponse:
    try:
        return NamedRecordResponse(**store.create_department(request.name))
    except ConflictError as e:
        raise _conflict(e) from e


@router.delete(
    "/departments/{department_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a department",
)
async def delete_department(department_id: int, admin: AdminProfile, store: Store) -> Response:
    """Delete a department no asset or user refers to."""
    try:
        store.delete_department(department_id)
    except RecordNotFoundError as e:
        raise _not_found(e) from e
    except ConflictError as e:
        raise _conflict(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ----------------------------------------------------------------------
# Users
# ----------------------------------------------------------------------


@router.get(
    "/users",
    response_model=list[ProfileResponse],
    summary="List users",
)
async def list_users(admin: AdminProfile, store: Store) -> list[ProfileResponse]:
    return [ProfileResponse.from_row(p) for p in store.list_profiles()]


@router.post(
    "/users",
    response_model=ProfileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
)
async def create_user(request: UserCreate, admin: AdminProfile, store: Store) -> ProfileResponse:
    """Create a user with a role and optional department."""
    try:
        profile = store.create_profile(
            email=request.email,
            full_name=request.full_name,
            password_hash=hash_password(request.password),
            role=request.role,
            department_id=request.department_id,
        )
    except ConflictError as e:
        raise _conflict(e) from e
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    return ProfileResponse.from_row(profile)


@router.patch(
    "/users/{user_id}/role",
    response_model=ProfileResponse,
    summary="Change a user's role",
)
async def update_user_role(
    user_id: str,
    request: RoleUpdate,
    admin: AdminProfile,
    store: Store,
) -> ProfileResponse:
    try:
        profile = store.update_role(user_id, request.role)
    except RecordNotFoundError as e:
        raise _not_found(e) from e
    return ProfileResponse.from_row(profile)
