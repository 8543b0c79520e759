class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidRangeError(ValidationError):
    """Raised when a date range starts after it ends."""


class ConcurrencyConflictError(DomainError):
    """Raised by the persistence layer when a concurrent writer won.

    Callers may retry the whole operation; the core never does.
    """
