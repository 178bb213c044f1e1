"""
Domain errors for the administration API.

Raised by services, converted to JSON by the handlers in main.py:

    {"error": <code>, "message": <message>}
"""


class DomainError(Exception):
    """Base class for administration errors."""

    status_code: int = 400
    code: str = "bad_request"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(DomainError):
    status_code = 404
    code = "not_found"


class ConflictError(DomainError):
    status_code = 409
    code = "conflict"


class ReservedResourceError(DomainError):
    """Built-in roles and permissions cannot be deleted."""

    status_code = 403
    code = "reserved"


class ValidationFailedError(DomainError):
    status_code = 400
    code = "validation_failed"
