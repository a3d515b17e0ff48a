"""
Study session schemas.
"""
from pydantic import BaseModel, Field
from typing import Optional

from vocabdeck.models.enums import ReviewOutcome, SessionState
from vocabdeck.schemas.card import CardResponse


class StudySessionResponse(BaseModel):
    """Snapshot of the study session as seen by the client."""
    state: SessionState
    current_card: Optional[CardResponse] = None
    is_flipped: bool = False
    remaining: int = Field(0, description="Cards left in this session, including the current one")
    due_count: int = Field(0, description="Cards currently due in the whole deck")


class ReviewRequest(BaseModel):
    """Answer for the current card."""
    outcome: ReviewOutcome

    class Config:
        json_schema_extra = {
            "example": {"outcome": "correct"}
        }


class ReviewResponse(BaseModel):
    """Result of a review: the rescheduled card and the session afterwards."""
    reviewed_card: CardResponse
    session: StudySessionResponse


class DueCountResponse(BaseModel):
    due_count: int
    total_count: int
