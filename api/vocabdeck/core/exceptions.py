"""
Custom exceptions for the application.
"""


class VocabDeckException(Exception):
    """Base exception for all VocabDeck application exceptions."""
    pass


class ValidationError(VocabDeckException):
    """Raised when validation fails."""
    pass


class NotFoundError(VocabDeckException):
    """Raised when a requested resource is not found."""
    pass


class ConflictError(VocabDeckException):
    """Raised when there's a conflict (e.g., an action not allowed in the current state)."""
    pass


class SessionStateError(ConflictError):
    """Raised when a study session action is not valid in the session's current state."""
    pass


class GenerationError(VocabDeckException):
    """Raised when the external generation service fails to produce a result."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason
