"""
Model enums.
"""
from enum import Enum


class ReviewOutcome(str, Enum):
    """How the learner answered a card."""
    CORRECT = "correct"
    INCORRECT = "incorrect"


class SessionState(str, Enum):
    """Lifecycle state of a study session."""
    EMPTY = "empty"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"
