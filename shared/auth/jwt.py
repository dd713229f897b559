"""
Session Tokens
==============

Signed access and refresh tokens for asset tracker sessions.

A token names its subject (the profile id) and, for convenience, the
e-mail the session was opened with. It never carries a role: the owning
service looks the role up on every request.
"""

from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

from jose import JWTError, jwt
from pydantic import BaseModel, Field

from shared.config import settings
from shared.logging import get_logger


logger = get_logger(__name__)


class TokenKind(str, Enum):
    """What a token may be used for."""

    ACCESS = "access"
    REFRESH = "refresh"


class TokenData(BaseModel):
    """Verified claims of a session token."""

    sub: str = Field(..., description="Profile id")
    exp: datetime
    iat: datetime = Field(default_factory=lambda: datetime.now(UTC))
    token_type: str = TokenKind.ACCESS.value
    email: str | None = None


class TokenPair(BaseModel):
    """Tokens issued at login."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Access token lifetime in seconds")


def _default_lifetime(kind: TokenKind) -> timedelta:
    if kind is TokenKind.REFRESH:
        return timedelta(days=settings.jwt.refresh_token_expire_days)
    return timedelta(minutes=settings.jwt.access_token_expire_minutes)


def _issue(claims: dict[str, Any], kind: TokenKind, lifetime: timedelta | None) -> str:
    now = datetime.now(UTC)
    expires_at = now + (lifetime or _default_lifetime(kind))

    # Only identity claims are signed; anything else the caller passes is dropped
    payload = {key: claims[key] for key in ("sub", "email") if claims.get(key) is not None}
    payload.update(exp=expires_at, iat=now, token_type=kind.value)

    token = jwt.encode(
        payload,
        settings.jwt.secret_key.get_secret_value(),
        algorithm=settings.jwt.algorithm,
    )
    logger.debug(
        "session_token_issued",
        kind=kind.value,
        sub=payload.get("sub"),
        expires_at=expires_at.isoformat(),
    )
    return token


def create_access_token(claims: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """
    Issue an access token.

    Args:
        claims: Must hold ``sub``; ``email`` is optional
        expires_delta: Lifetime override (default from settings)
    """
    return _issue(claims, TokenKind.ACCESS, expires_delta)


def create_refresh_token(claims: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """Issue a refresh token; same claims as an access token, longer lived."""
    return _issue(claims, TokenKind.REFRESH, expires_delta)


def create_token_pair(claims: dict[str, Any]) -> TokenPair:
    """Issue the access and refresh tokens returned by a login."""
    return TokenPair(
        access_token=create_access_token(claims),
        refresh_token=create_refresh_token(claims),
        expires_in=int(_default_lifetime(TokenKind.ACCESS).total_seconds()),
    )


def decode_token(token: str, verify_type: str | None = None) -> TokenData | None:
    """
    Verify a token and return its claims.

    Args:
        token: Encoded token
        verify_type: Required kind (``"access"`` or ``"refresh"``), if any

    Returns:
        TokenData, or None when the signature, expiry, kind or subject
        does not check out
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt.secret_key.get_secret_value(),
            algorithms=[settings.jwt.algorithm],
        )
    except JWTError as e:
        logger.warning("session_token_rejected", reason=str(e))
        return None

    kind = payload.get("token_type", TokenKind.ACCESS.value)
    if verify_type and kind != verify_type:
        logger.warning("session_token_rejected", reason="wrong_kind", expected=verify_type, actual=kind)
        return None
    if not payload.get("sub"):
        logger.warning("session_token_rejected", reason="no_subject")
        return None

    return TokenData(
        sub=payload["sub"],
        exp=datetime.fromtimestamp(payload["exp"], tz=UTC),
        iat=datetime.fromtimestamp(payload.get("iat", 0), tz=UTC),
        token_type=kind,
        email=payload.get("email"),
    )


def is_token_expired(token_data: TokenData) -> bool:
    return datetime.now(UTC) > token_data.exp
