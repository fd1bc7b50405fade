class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when sign-in credentials are invalid or no session exists."""


class AuthorizationError(DomainError):
    """Raised when an actor lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a record addressed by id does not exist."""
