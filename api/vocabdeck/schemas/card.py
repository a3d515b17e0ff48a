"""
Card schemas.
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime

from vocabdeck.utils.text_utils import clean_optional_text, require_text


class CardResponse(BaseModel):
    """Card response schema."""
    id: str
    word: str
    meaning: str
    image_url: str = ""
    folder_id: Optional[str] = None
    ai_explanation: Optional[str] = None
    explanation: str = ""
    created_at: datetime
    strength: int
    interval_days: int
    next_review_at: datetime

    class Config:
        from_attributes = True


class CardCreate(BaseModel):
    """Request to create a card."""
    word: str = Field(..., description="The vocabulary word")
    meaning: str = Field(..., description="Meaning or translation of the word")
    image_url: str = Field("", description="Image data URL or link (may be empty)")
    folder_id: Optional[str] = Field(None, description="Folder to put the card in")
    ai_explanation: Optional[str] = Field(None, description="Previously generated explanation")

    @field_validator('word')
    @classmethod
    def validate_word(cls, v):
        return require_text(v, "word")

    @field_validator('meaning')
    @classmethod
    def validate_meaning(cls, v):
        return require_text(v, "meaning")

    class Config:
        json_schema_extra = {
            "example": {
                "word": "serendipity",
                "meaning": "意外发现珍奇事物的本领",
                "image_url": "",
            }
        }


class CardUpdate(BaseModel):
    """
    Request to edit a card's content. Scheduling fields cannot be edited.

    Only fields present in the request are changed. An explicit null clears
    ai_explanation and image_url; word and meaning cannot be cleared.
    """
    word: Optional[str] = None
    meaning: Optional[str] = None
    image_url: Optional[str] = None
    ai_explanation: Optional[str] = None

    @field_validator('word')
    @classmethod
    def validate_word(cls, v):
        return require_text(v, "word")

    @field_validator('meaning')
    @classmethod
    def validate_meaning(cls, v):
        return require_text(v, "meaning")

    @field_validator('image_url')
    @classmethod
    def validate_image_url(cls, v):
        return v or ""


class ImportedWord(BaseModel):
    """One already-parsed word/meaning pair."""
    word: str
    meaning: str

    @field_validator('word')
    @classmethod
    def validate_word(cls, v):
        return require_text(v, "word")

    @field_validator('meaning')
    @classmethod
    def validate_meaning(cls, v):
        return require_text(v, "meaning")


class ImportCardsRequest(BaseModel):
    """Request to import a list of words as new cards (without images)."""
    items: List[ImportedWord] = Field(..., min_length=1)
    folder_id: Optional[str] = None


class ExplanationUpdate(BaseModel):
    """The learner's own explanation of a card (Feynman technique)."""
    explanation: str = ""


class MoveCardsRequest(BaseModel):
    """Move cards into a folder; folder_id None removes them from their folder."""
    card_ids: List[str] = Field(..., min_length=1)
    folder_id: Optional[str] = None


class GenerateExplanationRequest(BaseModel):
    """Optional hint steering the generated explanation."""
    hint: Optional[str] = None

    @field_validator('hint')
    @classmethod
    def validate_hint(cls, v):
        return clean_optional_text(v)


class GenerateExplanationsRequest(GenerateExplanationRequest):
    """Bulk explanation generation request."""
    card_ids: List[str] = Field(..., min_length=1)


class ExplanationResultResponse(BaseModel):
    """Per-card result of bulk explanation generation."""
    card_id: str
    ok: bool
    explanation: Optional[str] = None
    error: Optional[str] = None


class GenerateExplanationsResponse(BaseModel):
    """Bulk explanation generation response."""
    results: List[ExplanationResultResponse]
    succeeded: int
    failed: int
