class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced record, request or schedule does not exist."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class ConcurrencyConflict(DomainError):
    """Raised when a conditional write detects a lost update."""


class LocationVerificationError(DomainError):
    """Raised when the WiFi admission gate refuses a check-in."""


class ComputationError(DomainError):
    """Raised when a derived figure cannot be computed (e.g. zero expected hours)."""


class ReconciliationRequired(DomainError):
    """Raised when a multi-step write failed and could not be rolled back."""
