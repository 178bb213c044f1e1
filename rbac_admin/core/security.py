"""
Access token helpers.

Tokens are issued elsewhere; this service only needs to read the caller's
subject and role. create_access_token exists for tooling and tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt

from rbac_admin.core.config import settings


def create_access_token(
    subject: str,
    role: str | None,
    expires_minutes: int | None = None,
    extra: dict[str, Any] | None = None,
) -> str:
    """Create a signed JWT carrying the role claim."""
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.auth.access_token_expire_minutes
    )
    payload: dict[str, Any] = {
        "sub": str(subject),
        "exp": expire,
        "type": "access",
    }
    if role is not None:
        payload[settings.auth.role_claim] = role
    if extra:
        payload.update(extra)

    return jwt.encode(
        payload,
        settings.auth.secret_key,
        algorithm=settings.auth.algorithm,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify and decode a JWT.

    Raises:
        JWTError: If the token is invalid or expired
    """
    return jwt.decode(
        token,
        settings.auth.secret_key,
        algorithms=[settings.auth.algorithm],
    )
