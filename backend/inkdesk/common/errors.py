class DomainError(Exception):
    """Base domain error with a user-facing message."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFound(DomainError):
    """Raised when a required entity is missing."""


class PermissionDenied(DomainError):
    """Raised when the account may not perform the action."""


class QuotaExceeded(DomainError):
    """Raised when a requested quantity is above the assignment cap."""


class Conflict(DomainError):
    """Raised when a uniqueness rule would be violated."""


class AlreadyReviewed(DomainError):
    """Raised when reviewing a request that is no longer pending."""


class InsufficientStock(DomainError):
    """Raised when an approval would take stock below zero."""


class InvalidRequest(DomainError):
    """Raised when the input is not valid for the operation."""
