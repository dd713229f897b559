"""
Authentication
==============

Identity for the asset tracker API: bcrypt password storage, signed
session tokens and the FastAPI dependency that resolves a bearer token to
a ``User``. Roles are not handled here.

Usage:
    profile = store.get_profile_by_email(email)
    if profile and verify_password(password, profile["password_hash"]):
        return create_token_pair({"sub": profile["id"], "email": email})

    @router.get("/me")
    async def me(user: Annotated[User, Depends(get_current_active_user)]):
        ...
"""

from shared.auth.jwt import (
    create_access_token,
    create_refresh_token,
    create_token_pair,
    decode_token,
    TokenData,
    TokenKind,
    TokenPair,
)
from shared.auth.password import MAX_PASSWORD_BYTES, hash_password, needs_rehash, verify_password
from shared.auth.dependencies import (
    User,
    get_current_user,
    get_current_active_user,
    oauth2_scheme,
)

__all__ = [
    # JWT
    "create_access_token",
    "create_refresh_token",
    "create_token_pair",
    "decode_token",
    "TokenData",
    "TokenKind",
    "TokenPair",
    # Password
    "hash_password",
    "MAX_PASSWORD_BYTES",
    "needs_rehash",
    "verify_password",
    # Dependencies
    "User",
    "get_current_user",
    "get_current_active_user",
    "oauth2_scheme",
]
