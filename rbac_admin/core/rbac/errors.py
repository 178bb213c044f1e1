"""
Policy engine errors.

Two families:

Enforcement path (caught by the AuthorizationGate, converted to a deny):
    NotInitializedError      engine queried before the first synchronization
    MissingAuthContextError  no usable role on the request
    NotAuthenticatedError    no authenticated caller at all
    MatchError               a stored pattern could not be evaluated
    AccessDeniedError        no policy tuple matched

Mutation path (surfaced to the administrative caller):
    InvalidPolicyError       submitted tuple is malformed
    SourceQueryError         synchronization could not read association data
    PersistenceError         write-through to the policy store failed

Every error carries a fixed public message. The constructor message is the
diagnostic detail and only goes to the log.
"""


class AuthorizationError(Exception):
    """Base class for enforcement-path failures."""

    status_code: int = 403
    code: str = "forbidden"
    public_message: str = "Access denied"

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.public_message)
        self.detail = detail or self.public_message


class NotInitializedError(AuthorizationError):
    status_code = 500
    code = "authorization_unavailable"
    public_message = "Authorization system not initialized"


class MissingAuthContextError(AuthorizationError):
    status_code = 403
    code = "missing_role"
    public_message = "User role not found"


class NotAuthenticatedError(AuthorizationError):
    status_code = 401
    code = "not_authenticated"
    public_message = "Not authenticated"


class MatchError(AuthorizationError):
    """A stored policy pattern is malformed (indicates upstream data corruption)."""

    status_code = 500
    code = "access_control_error"
    public_message = "Access control error"


class AccessDeniedError(AuthorizationError):
    status_code = 403
    code = "access_denied"
    public_message = "Access denied"


class PolicyError(Exception):
    """Base class for mutation-path failures."""

    status_code: int = 500
    code: str = "policy_error"
    public_message: str = "Policy operation failed"


class SourceQueryError(PolicyError):
    """Association data could not be read; the previous snapshot stays live."""

    status_code = 503
    code = "policy_source_unavailable"
    public_message = "Policy source unavailable"


class PersistenceError(PolicyError):
    """Write-through failed after the in-memory mutation was applied."""

    code = "policy_persistence_failed"
    public_message = "Policy persistence failed"


class InvalidPolicyError(PolicyError):
    """A tuple submitted for mutation is not a usable pattern."""

    status_code = 400
    code = "invalid_policy"
    public_message = "Invalid policy"
