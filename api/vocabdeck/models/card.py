"""
Card model.
"""
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from uuid import uuid4
from sqlalchemy import Column, Text


def new_id() -> str:
    """Generate an opaque identifier for a card or folder."""
    return uuid4().hex


class Card(SQLModel, table=True):
    """Card table - a vocabulary word with its meaning and review schedule."""
    __tablename__ = "card"

    id: str = Field(default_factory=new_id, primary_key=True)
    word: str
    meaning: str
    image_url: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))  # Data URL or link
    folder_id: Optional[str] = Field(default=None, foreign_key="folder.id")
    ai_explanation: Optional[str] = Field(default=None, sa_column=Column(Text))  # Generated explanation
    explanation: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))  # Learner's own words
    created_at: datetime = Field(default_factory=datetime.now)
    position: int = Field(default=0, index=True)  # Deck order, 0 = first; set on save

    # Scheduling fields, written only through CardStore.commit_schedule
    strength: int = Field(default=0)  # Consecutive correct reviews
    interval_days: int = Field(default=1)
    next_review_at: datetime = Field(default_factory=datetime.now)
