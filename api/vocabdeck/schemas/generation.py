"""
Generation schemas.
"""
from pydantic import BaseModel, field_validator

from vocabdeck.utils.text_utils import require_text


class GenerationStatusResponse(BaseModel):
    """Whether an API key is configured for the generation service."""
    ready: bool


class ApiKeyRequest(BaseModel):
    """Set (or clear, with an empty string) the Gemini API key."""
    api_key: str


class GenerateImageRequest(BaseModel):
    """Request an image preview for a word before the card exists."""
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


class GenerateImageResponse(BaseModel):
    image_url: str
