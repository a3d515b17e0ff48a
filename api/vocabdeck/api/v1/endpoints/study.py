"""
Study session endpoints.

Every endpoint first refreshes the session against the card store, so the
client never sees a session built from a stale due set.
"""
from fastapi import APIRouter, Depends
import logging

from vocabdeck.core.dependencies import get_card_store, get_study_session
from vocabdeck.schemas.card import CardResponse
from vocabdeck.schemas.study import (
    DueCountResponse,
    ReviewRequest,
    ReviewResponse,
    StudySessionResponse,
)
from vocabdeck.services.card_store_service import CardStore
from vocabdeck.services.srs_service import count_due
from vocabdeck.services.study_session_service import StudySession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/study", tags=["study"])


def build_session_response(study: StudySession) -> StudySessionResponse:
    """Snapshot the session for the client."""
    current_card = study.current_card
    return StudySessionResponse(
        state=study.state,
        current_card=CardResponse.model_validate(current_card) if current_card is not None else None,
        is_flipped=study.is_flipped,
        remaining=study.remaining,
        due_count=count_due(study.store.cards),
    )


@router.get("/session", response_model=StudySessionResponse)
async def get_session_state(study: StudySession = Depends(get_study_session)):
    """Current session state and the card to show (front side unless flipped)."""
    study.refresh()
    return build_session_response(study)


@router.post("/session/restart", response_model=StudySessionResponse)
async def restart_session(study: StudySession = Depends(get_study_session)):
    """Discard the working list and start over from the cards due now."""
    study.start()
    return build_session_response(study)


@router.post("/session/flip", response_model=StudySessionResponse)
async def flip_card(study: StudySession = Depends(get_study_session)):
    """Turn the current card over. Has no effect on scheduling."""
    study.refresh()
    study.flip()
    return build_session_response(study)


@router.post("/session/review", response_model=ReviewResponse)
async def review_card(
    request: ReviewRequest,
    study: StudySession = Depends(get_study_session)
):
    """
    Answer the current card.

    A correct answer removes the card from this session and pushes its next
    review further out; an incorrect answer resets its schedule and sends it
    to the back of the session.
    """
    study.refresh()
    card = study.review(request.outcome)
    logger.info(
        f"Reviewed '{card.word}' as {request.outcome.value}: strength={card.strength}, "
        f"next_review_at={card.next_review_at:%Y-%m-%d}, {study.remaining} left"
    )
    return ReviewResponse(
        reviewed_card=CardResponse.model_validate(card),
        session=build_session_response(study),
    )


@router.get("/due-count", response_model=DueCountResponse)
async def get_due_count(store: CardStore = Depends(get_card_store)):
    """Number of cards due today, for the study badge."""
    return DueCountResponse(due_count=count_due(store.cards), total_count=len(store))
