"""
Authorization gate.

Turns an enforcer decision into an allow / reject outcome for one request.
The gate never raises: every failure, including engine faults, becomes a
rejection with a fixed public message. Details only go to the log.

    uninitialized engine        -> 500 "Authorization system not initialized"
    no role on the request      -> 403 "User role not found"
    malformed stored pattern    -> 500 "Access control error"
    no matching policy          -> 403 "Access denied"

The HTTP binding lives in rbac_admin.api.dependencies.permissions.
"""

import structlog

from .enforcer import Enforcer
from .errors import (
    AccessDeniedError,
    AuthorizationError,
    MatchError,
    MissingAuthContextError,
    NotInitializedError,
)
from .interfaces import GateDecision

logger = structlog.get_logger(__name__)


class AuthorizationGate:
    """Per-request authorization check against a shared Enforcer."""

    def __init__(self, enforcer: Enforcer):
        self.enforcer = enforcer

    def check(self, role: str | None, resource: str, action: str) -> GateDecision:
        """Decide one request. Never raises."""
        try:
            self.authorize(role, resource, action)
        except AuthorizationError as e:
            return GateDecision.reject(e.public_message, e.status_code, e.code)
        except Exception:
            logger.exception("rbac.gate_failed", resource=resource, action=action)
            error = MatchError()
            return GateDecision.reject(error.public_message, error.status_code, error.code)
        return GateDecision.allow()

    def authorize(self, role: str | None, resource: str, action: str) -> None:
        """
        Raise unless the request is allowed.

        Raises:
            NotInitializedError: Engine has no policy set yet
            MissingAuthContextError: No usable role
            MatchError: A stored pattern for the role is malformed
            AccessDeniedError: No policy matched
        """
        if not self.enforcer.initialized:
            logger.error("rbac.not_initialized", resource=resource, action=action)
            raise NotInitializedError()

        if not isinstance(role, str) or not role:
            logger.warning("rbac.missing_role", resource=resource, action=action)
            raise MissingAuthContextError()

        try:
            allowed = self.enforcer.enforce(role, resource, action)
        except MatchError as e:
            # Stored data is corrupt; needs an operator.
            logger.error(
                "rbac.match_error",
                role=role,
                resource=resource,
                action=action,
                error=e.detail,
                alert=True,
            )
            raise

        if not allowed:
            logger.warning("rbac.access_denied", role=role, resource=resource, action=action)
            raise AccessDeniedError(f"{role} may not {action} {resource}")

        logger.debug("rbac.access_granted", role=role, resource=resource, action=action)
