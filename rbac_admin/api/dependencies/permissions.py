"""
Authorization dependencies.

require_policy runs the AuthorizationGate for the current request, using
the request path as the resource and the HTTP method as the action.

Usage:
    router = APIRouter(dependencies=[Depends(require_policy)])
"""

from fastapi import Depends, HTTPException, Request

from rbac_admin.core.rbac import AuthorizationGate

from .auth import Principal, get_current_principal


class PolicyRejected(HTTPException):
    """Gate rejection, carrying the machine-readable code."""

    def __init__(self, status_code: int, detail: str, code: str):
        super().__init__(status_code=status_code, detail=detail)
        self.code = code


def get_gate(request: Request) -> AuthorizationGate:
    return request.app.state.gate


async def require_policy(
    request: Request,
    principal: Principal = Depends(get_current_principal),
    gate: AuthorizationGate = Depends(get_gate),
) -> Principal:
    """
    Allow the request only if the caller's role grants path + method.

    Raises:
        PolicyRejected: With the gate's status (403 or 500)
    """
    role = getattr(request.state, "role", None)
    decision = gate.check(role, request.url.path, request.method)
    if not decision.allowed:
        raise PolicyRejected(decision.status_code, decision.reason, decision.code)
    return principal
