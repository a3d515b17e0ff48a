import os
import random
from datetime import datetime

import pytest

# Configure an isolated in-memory database before the app modules are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["GOOGLE_GEMINI_API_KEY"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

from fastapi.testclient import TestClient
from sqlmodel import SQLModel

from vocabdeck.core.database import engine
from vocabdeck.main import create_app
from vocabdeck.models.card import Card
from vocabdeck.services.card_store_service import CardStore


@pytest.fixture
def now():
    """A fixed afternoon so day-granularity behaviour is visible."""
    return datetime(2024, 3, 10, 15, 30)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def make_card(now):
    """Factory for cards that are due at `now` unless told otherwise."""
    def _make_card(word, meaning=None, **fields):
        fields.setdefault("next_review_at", now)
        fields.setdefault("created_at", now)
        return Card(word=word, meaning=meaning or f"meaning of {word}", **fields)
    return _make_card


@pytest.fixture
def store():
    return CardStore()


@pytest.fixture
def client():
    """API client backed by a fresh in-memory database."""
    SQLModel.metadata.drop_all(engine)
    app = create_app(rng=random.Random(0))
    with TestClient(app) as test_client:
        yield test_client
    SQLModel.metadata.drop_all(engine)
