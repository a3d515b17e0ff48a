"""
Endpoints for AI-assisted card content: images and explanations.
"""
from fastapi import APIRouter, Depends
import logging

from vocabdeck.core.dependencies import get_card_store, get_generation_service
from vocabdeck.schemas.card import (
    CardResponse,
    ExplanationResultResponse,
    GenerateExplanationRequest,
    GenerateExplanationsRequest,
    GenerateExplanationsResponse,
)
from vocabdeck.schemas.generation import (
    ApiKeyRequest,
    GenerateImageRequest,
    GenerateImageResponse,
    GenerationStatusResponse,
)
from vocabdeck.services.card_store_service import CardStore
from vocabdeck.services.generation_service import ExplanationResult, GenerationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/generation", tags=["generation"])


@router.get("/status", response_model=GenerationStatusResponse)
async def generation_status(generator: GenerationService = Depends(get_generation_service)):
    return GenerationStatusResponse(ready=generator.is_ready)


@router.put("/api-key", response_model=GenerationStatusResponse)
async def set_api_key(
    request: ApiKeyRequest,
    generator: GenerationService = Depends(get_generation_service)
):
    """Set the Gemini API key used for generation (empty string clears it)."""
    generator.configure(request.api_key)
    return GenerationStatusResponse(ready=generator.is_ready)


@router.post("/image", response_model=GenerateImageResponse)
async def generate_image_preview(
    request: GenerateImageRequest,
    generator: GenerationService = Depends(get_generation_service)
):
    """Generate an image for a word that has no card yet. Nothing is stored."""
    image_url = await generator.generate_image(request.word, request.meaning)
    return GenerateImageResponse(image_url=image_url)


@router.post("/cards/{card_id}/image", response_model=CardResponse)
async def generate_card_image(
    card_id: str,
    store: CardStore = Depends(get_card_store),
    generator: GenerationService = Depends(get_generation_service)
):
    """Generate an image for an existing card and store it on the card."""
    card = store.get(card_id)
    image_url = await generator.generate_image(card.word, card.meaning)
    # The card may have been deleted while the image was generated
    return store.update_content(card_id, image_url=image_url)


@router.post("/cards/{card_id}/explanation", response_model=CardResponse)
async def generate_card_explanation(
    card_id: str,
    request: GenerateExplanationRequest,
    store: CardStore = Depends(get_card_store),
    generator: GenerationService = Depends(get_generation_service)
):
    """Generate an AI explanation for a card, optionally steered by a hint."""
    card = store.get(card_id)
    explanation = await generator.generate_explanation(card.word, card.meaning, request.hint)
    return store.update_content(card_id, ai_explanation=explanation)


@router.post("/explanations", response_model=GenerateExplanationsResponse)
async def generate_card_explanations(
    request: GenerateExplanationsRequest,
    store: CardStore = Depends(get_card_store),
    generator: GenerationService = Depends(get_generation_service)
):
    """
    Generate AI explanations for several cards at once.

    Calls run concurrently and each card succeeds or fails on its own:
    successful explanations are stored even when others fail, and every
    failure is reported with its reason.
    """
    cards = [store.get(card_id) for card_id in dict.fromkeys(request.card_ids)]
    results = await generator.generate_explanations(
        [(card.id, card.word, card.meaning) for card in cards],
        hint=request.hint,
    )

    committed = []
    for result in results:
        if result.ok and result.card_id not in store:
            result = ExplanationResult(card_id=result.card_id, error="Card was deleted during generation")
        elif result.ok:
            store.update_content(result.card_id, ai_explanation=result.explanation)
        committed.append(result)

    succeeded = sum(1 for r in committed if r.ok)
    return GenerateExplanationsResponse(
        results=[
            ExplanationResultResponse(card_id=r.card_id, ok=r.ok, explanation=r.explanation, error=r.error)
            for r in committed
        ],
        succeeded=succeeded,
        failed=len(committed) - succeeded,
    )
