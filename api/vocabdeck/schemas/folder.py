"""
Folder schemas.
"""
from pydantic import BaseModel, field_validator

from vocabdeck.utils.text_utils import require_text


class FolderResponse(BaseModel):
    """Folder response schema."""
    id: str
    name: str
    card_count: int = 0


class FolderCreate(BaseModel):
    """Request to create a folder."""
    name: str

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return require_text(v, "name")
