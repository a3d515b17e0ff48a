"""
Models package - imports all models so they register with SQLModel.
"""
from vocabdeck.models.enums import ReviewOutcome, SessionState
from vocabdeck.models.folder import Folder
from vocabdeck.models.card import Card

__all__ = [
    'ReviewOutcome',
    'SessionState',
    'Folder',
    'Card',
]
