class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = "DomainError"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "ValidationError"


class AuthenticationError(DomainError):
    """Raised when there is no authenticated actor or its record is gone."""

    kind = "Unauthorized"


class AuthorizationError(DomainError):
    """Raised when a user lacks the role or ownership for an action."""

    kind = "Forbidden"


class NotFoundError(DomainError):
    """Raised when a referenced request or employee does not exist."""

    kind = "NotFound"


class InvalidStateError(DomainError):
    """Raised when a transition is attempted on a resolved request."""

    kind = "InvalidState"


class ConflictError(InvalidStateError):
    """Raised when a conditional status write matched no row."""
