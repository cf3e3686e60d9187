"""
JWT access token handling.

Tokens are issued by the authentication service; the forum only verifies
them and reads the user id from the `sub` claim. create_access_token() mirrors
what that service issues and is used by local tooling and tests.
"""

from datetime import UTC, datetime, timedelta

import jwt

from app.config import settings

ACCESS_TOKEN_TYPE = "access"


def create_access_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """
    Create a signed access token for a user.

    Args:
        user_id: Becomes the `sub` claim
        expires_delta: Lifetime, defaults to ACCESS_TOKEN_EXPIRE_MINUTES
    """
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    issued_at = datetime.now(UTC)
    claims = {
        "sub": str(user_id),
        "iat": issued_at,
        "exp": issued_at + lifetime,
        "type": ACCESS_TOKEN_TYPE,
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_access_token(token: str) -> int | None:
    """
    Return the user id carried by a valid access token.

    Expired, tampered, malformed and non-access tokens all yield None; the
    caller turns that into a 401.
    """
    try:
        claims = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.InvalidTokenError:
        return None

    if claims.get("type") != ACCESS_TOKEN_TYPE:
        return None

    subject = claims["sub"]
    return int(subject) if str(subject).isdigit() else None
