"""
Card endpoints: create, browse, edit, delete, import and organize cards.
"""
from fastapi import APIRouter, Depends, File, UploadFile, status
from typing import List, Optional
import logging

from vocabdeck.core.dependencies import get_card_store
from vocabdeck.models.card import Card
from vocabdeck.schemas.card import (
    CardCreate,
    CardResponse,
    CardUpdate,
    ExplanationUpdate,
    ImportCardsRequest,
    MoveCardsRequest,
)
from vocabdeck.services.card_store_service import CardStore
from vocabdeck.services.image_service import process_image_bytes

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cards", tags=["cards"])


@router.get("", response_model=List[CardResponse])
async def list_cards(
    folder_id: Optional[str] = None,
    ungrouped: bool = False,
    store: CardStore = Depends(get_card_store)
):
    """
    List cards, newest first.

    Args:
        folder_id: Only return cards in this folder
        ungrouped: Only return cards without a folder (ignored if folder_id is given)
    """
    if folder_id is not None:
        store.get_folder(folder_id)
        return store.cards_in_folder(folder_id)
    if ungrouped:
        return store.cards_in_folder(None)
    return store.cards


@router.post("", response_model=CardResponse, status_code=status.HTTP_201_CREATED)
async def create_card(
    request: CardCreate,
    store: CardStore = Depends(get_card_store)
):
    """Create a card. New cards are due immediately."""
    card = Card(
        word=request.word,
        meaning=request.meaning,
        image_url=request.image_url,
        folder_id=request.folder_id,
        ai_explanation=request.ai_explanation,
    )
    store.add(card)
    logger.info(f"Created card {card.id} for '{card.word}'")
    return card


@router.post("/import", response_model=List[CardResponse], status_code=status.HTTP_201_CREATED)
async def import_cards(
    request: ImportCardsRequest,
    store: CardStore = Depends(get_card_store)
):
    """
    Import already-parsed word/meaning pairs as new cards without images.

    The imported cards keep the order of the request and are placed before
    the existing cards.
    """
    cards = [
        Card(word=item.word, meaning=item.meaning, folder_id=request.folder_id)
        for item in request.items
    ]
    store.add_many(cards)
    logger.info(f"Imported {len(cards)} card(s)")
    return cards


@router.post("/move", response_model=List[CardResponse])
async def move_cards(
    request: MoveCardsRequest,
    store: CardStore = Depends(get_card_store)
):
    """Move cards into a folder, or out of any folder when folder_id is null."""
    return store.move_to_folder(request.card_ids, request.folder_id)


@router.get("/{card_id}", response_model=CardResponse)
async def get_card(card_id: str, store: CardStore = Depends(get_card_store)):
    return store.get(card_id)


@router.patch("/{card_id}", response_model=CardResponse)
async def update_card(
    card_id: str,
    request: CardUpdate,
    store: CardStore = Depends(get_card_store)
):
    """Edit a card's word, meaning, image or generated explanation."""
    fields = request.model_dump(exclude_unset=True)
    return store.update_content(card_id, **fields)


@router.delete("/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_card(card_id: str, store: CardStore = Depends(get_card_store)):
    store.remove(card_id)


@router.put("/{card_id}/explanation", response_model=CardResponse)
async def update_explanation(
    card_id: str,
    request: ExplanationUpdate,
    store: CardStore = Depends(get_card_store)
):
    """Save the learner's own explanation of the card."""
    return store.update_content(card_id, explanation=request.explanation)


@router.post("/{card_id}/image", response_model=CardResponse)
async def upload_card_image(
    card_id: str,
    file: UploadFile = File(...),
    store: CardStore = Depends(get_card_store)
):
    """
    Upload an image for a card.

    The image is center-cropped to a square, resized and stored on the card
    as a JPEG data URL.
    """
    store.get(card_id)
    file_content = await file.read()
    image_url = process_image_bytes(file_content)
    return store.update_content(card_id, image_url=image_url)
