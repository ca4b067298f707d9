class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidTransition(DomainError):
    """Raised when an action is not legal in the employee's current shift state."""

    def __init__(self, message: str, *, state=None, action=None):
        super().__init__(message)
        self.state = state
        self.action = action


class NotFound(DomainError):
    """Raised when an employee or session id is unknown."""


class StorageError(DomainError):
    """Raised when the backing store rejects a write."""
