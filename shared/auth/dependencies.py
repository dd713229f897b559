"""
Request Authentication
======================

FastAPI dependencies that turn a bearer token into a caller identity.
Authorization (roles) belongs to the service that owns the profiles.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel

from shared.auth.jwt import TokenKind, decode_token
from shared.logging import get_logger


logger = get_logger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token", auto_error=False)

_UNAUTHENTICATED = "Could not validate credentials"


class User(BaseModel):
    """Caller identity established from an access token."""

    id: str
    email: str | None = None
    is_active: bool = True


def _unauthenticated() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=_UNAUTHENTICATED,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    token: Annotated[str | None, Depends(oauth2_scheme)],
) -> User:
    """
    Identify the caller.

    Raises:
        HTTPException: 401 without a valid access token; refresh tokens
            are not accepted here
    """
    if token is None:
        logger.info("request_unauthenticated", reason="no_token")
        raise _unauthenticated()

    claims = decode_token(token, verify_type=TokenKind.ACCESS.value)
    if claims is None:
        raise _unauthenticated()

    return User(id=claims.sub, email=claims.email)


async def get_current_active_user(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Identify the caller and refuse deactivated accounts with 403."""
    if not current_user.is_active:
        logger.warning("inactive_user_rejected", user_id=current_user.id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Inactive user")
    return current_user
