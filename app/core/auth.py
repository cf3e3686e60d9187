"""
Authentication dependencies for FastAPI route protection.

The forum trusts the principal carried by the access token; it does not
re-check credentials. This module provides:
- Extracting and verifying the JWT access token (Bearer header or cookie)
- Loading the current user from the database
- The admin role gate used by moderation endpoints
"""

from typing import Annotated

from fastapi import Cookie, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import UserRole
from app.core.database import get_db
from app.core.errors import AuthorizationError
from app.core.logging import set_user_context
from app.core.security import verify_access_token
from app.models.user import Users

bearer_scheme = HTTPBearer(auto_error=False)


def _extract_token(
    credentials: HTTPAuthorizationCredentials | None, access_token: str | None
) -> str | None:
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return access_token


async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
    access_token: Annotated[str | None, Cookie()] = None,
) -> int:
    """
    Extract and verify the JWT access token.

    The Authorization: Bearer header wins over the access_token cookie.

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired
    """
    token = _extract_token(credentials, access_token)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = verify_access_token(token)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user_id


async def get_current_user(
    user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Users:
    """
    Load current user from database using verified token.

    Raises:
        HTTPException: 401 if user not found
    """
    user = await db.get(Users, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    set_user_context(user_id)
    return user


async def get_optional_current_user(
    db: Annotated[AsyncSession, Depends(get_db)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
    access_token: Annotated[str | None, Cookie()] = None,
) -> Users | None:
    """
    Get current user if authenticated, otherwise return None.

    Used by read endpoints that personalise their output (e.g. whether the
    viewer already upvoted a post) but stay public.
    """
    token = _extract_token(credentials, access_token)
    if not token:
        return None

    user_id = verify_access_token(token)
    if user_id is None:
        return None

    return await db.get(Users, user_id)


async def require_admin(
    current_user: Annotated[Users, Depends(get_current_user)],
) -> Users:
    """
    Require current user to be an admin.

    Raises:
        AuthorizationError: if user is not an admin
    """
    if current_user.role != UserRole.ADMIN:
        raise AuthorizationError("Admin privileges required")
    return current_user


def is_owner_or_admin(user: Users, owner_id: int) -> bool:
    """True when the user owns the resource or holds the admin role."""
    return user.user_id == owner_id or user.role == UserRole.ADMIN


# Type aliases for dependency injection
CurrentUser = Annotated[Users, Depends(get_current_user)]
OptionalCurrentUser = Annotated[Users | None, Depends(get_optional_current_user)]
AdminUser = Annotated[Users, Depends(require_admin)]
