"""
FastAPI dependencies handing out the application's shared objects.

The card store, study session and generation service live on app.state
(created at startup in main.py) and are passed to endpoints explicitly.
"""
from fastapi import Request

from vocabdeck.services.card_store_service import CardStore
from vocabdeck.services.generation_service import GenerationService
from vocabdeck.services.study_session_service import StudySession


def get_card_store(request: Request) -> CardStore:
    """Dependency for getting the card store."""
    return request.app.state.card_store


def get_study_session(request: Request) -> StudySession:
    """Dependency for getting the study session bound to the card store."""
    return request.app.state.study_session


def get_generation_service(request: Request) -> GenerationService:
    """Dependency for getting the generation service."""
    return request.app.state.generation_service
