"""
Request Context Utilities.

Provides request IDs and the authenticated role for:
- Log correlation
- Debugging authorization decisions in production

Usage:
    # Set by RequestIdMiddleware (automatic)
    from rbac_admin.utils.context import get_request_id

    logger.info("Processing", request_id=get_request_id())
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Any, Optional


# Request-scoped context using contextvars (async-safe)
_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_role: ContextVar[Optional[str]] = ContextVar("role", default=None)


def get_request_id() -> Optional[str]:
    """Get the current request ID (None outside of a request)."""
    return _request_id.get()


def set_request_id(request_id: str):
    """Set the request ID, returning the token needed to reset it."""
    return _request_id.set(request_id)


def reset_request_id(token) -> None:
    _request_id.reset(token)


def get_context_role() -> Optional[str]:
    """Get the authenticated role for the current request."""
    return _role.get()


def set_context_role(role: Optional[str]) -> None:
    """
    Record the authenticated role for log correlation.

    Call this from the authentication dependency once the token is verified.
    """
    _role.set(role)


def add_request_context(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """
    Structlog processor that adds request context to all logs.

    Usage:
        structlog.configure(
            processors=[
                add_request_context,
                structlog.processors.JSONRenderer(),
            ]
        )
    """
    request_id = get_request_id()
    if request_id:
        event_dict.setdefault("request_id", request_id)

    role = get_context_role()
    if role:
        event_dict.setdefault("caller_role", role)

    return event_dict
