class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist in the company."""


class ConflictError(DomainError):
    """Raised when a change clashes with existing data (overlaps, duplicates)."""


class AuthenticationError(DomainError):
    """Raised when credentials (kiosk PIN) or the company context are missing or wrong."""


class AuthorizationError(DomainError):
    """Raised when the caller may not act on a record."""
