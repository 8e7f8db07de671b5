class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class PrincipalNotFoundError(AuthenticationError):
    """Raised when no Manager exists for the given principal name."""


class AuthorizationError(DomainError):
    """Raised when a principal lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a requested record does not exist."""


class ConflictError(DomainError):
    """Raised when a write carries a stale version."""


class DuplicateManagerError(DomainError):
    """Raised by repositories when a Manager name is already taken."""
