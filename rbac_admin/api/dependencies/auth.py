"""
Authentication dependencies.

Callers present a Bearer JWT. The token's subject and role claim become a
Principal; the role is also put on request.state.role where the
authorization gate reads it.

Usage:
    @router.get("/me")
    async def handler(principal: CurrentPrincipal):
        ...
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from rbac_admin.core.config import settings
from rbac_admin.core.rbac import NotAuthenticatedError
from rbac_admin.core.security import decode_access_token
from rbac_admin.utils.context import set_context_role


bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """The authenticated caller."""
    subject: str
    role: str | None


async def get_current_principal(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    """
    Get the authenticated caller from the Bearer token.

    A token without a role claim still authenticates; the gate then rejects
    the request for lack of a role.

    Raises:
        NotAuthenticatedError: If the token is missing or invalid
    """
    if not credentials or not credentials.credentials:
        raise NotAuthenticatedError("no bearer token")

    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError as e:
        raise NotAuthenticatedError(f"invalid token: {e}") from e

    subject = payload.get("sub")
    if not subject:
        raise NotAuthenticatedError("token has no subject")

    role = payload.get(settings.auth.role_claim)
    if not isinstance(role, str) or not role:
        role = None

    request.state.role = role
    set_context_role(role)
    return Principal(subject=str(subject), role=role)


# Authenticated caller (required)
CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
