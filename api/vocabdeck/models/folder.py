"""
Folder model.
"""
from sqlmodel import SQLModel, Field

from vocabdeck.models.card import new_id


class Folder(SQLModel, table=True):
    """Folder table - a named group of cards."""
    __tablename__ = "folder"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
