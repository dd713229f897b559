"""
Authentication API Endpoints.

Sign-up, login and current profile.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from shared.auth import (
    MAX_PASSWORD_BYTES,
    TokenPair,
    create_token_pair,
    hash_password,
    needs_rehash,
    verify_password,
)
from shared.logging import get_logger
from services.asset_tracker.dependencies import CurrentProfile, Store
from services.asset_tracker.store import ConflictError


logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


class SignupRequest(BaseModel):
    """Self-service account registration."""

    email: str = Field(..., min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=8, max_length=MAX_PASSWORD_BYTES)
    full_name: str = Field(..., min_length=1, max_length=200)


class LoginRequest(BaseModel):
    """Credentials exchanged for a token pair."""

    email: str
    password: str


class ProfileResponse(BaseModel):
    """User profile response."""

    id: str
    email: str
    full_name: str
    role: str
    department_id: int | None
    department_name: str | None = None
    created_at: datetime

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> ProfileResponse:
        """Create response from a profile row."""
        department = row.get("departments")
        return cls(
            id=row["id"],
            email=row["email"],
            full_name=row["full_name"],
            role=row["role"],
            department_id=row["department_id"],
            department_name=department["name"] if department else None,
            created_at=row["created_at"],
        )


@router.post(
    "/signup",
    response_model=ProfileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
)
async def signup(request: SignupRequest, store: Store) -> ProfileResponse:
    """Register a new account with the ``user`` role."""
    try:
        profile = store.create_profile(
            email=request.email,
            full_name=request.full_name,
            password_hash=hash_password(request.password),
        )
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e

    return ProfileResponse.from_row(profile)


@router.post(
    "/token",
    response_model=TokenPair,
    summary="Log in",
)
async def login(request: LoginRequest, store: Store) -> TokenPair:
    """Exchange e-mail and password for access and refresh tokens."""
    profile = store.get_profile_by_email(request.email)
    password_hash = profile.get("password_hash") if profile else None

    if not password_hash or not verify_password(request.password, password_hash):
        logger.warning("login_failed", email_domain=request.email.rpartition("@")[2])
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if needs_rehash(password_hash):
        store.update_password_hash(profile["id"], hash_password(request.password))

    logger.info("login_succeeded", user_id=profile["id"])
    return create_token_pair({"sub": profile["id"], "email": profile["email"]})


@router.get(
    "/me",
    response_model=ProfileResponse,
    summary="Current profile",
)
async def me(profile: CurrentProfile) -> ProfileResponse:
    """Get the authenticated user's profile."""
    return ProfileResponse.from_row(profile)
