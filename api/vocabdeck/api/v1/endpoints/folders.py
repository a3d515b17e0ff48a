"""
Folder endpoints.
"""
from fastapi import APIRouter, Depends, status
from typing import List
import logging

from vocabdeck.core.dependencies import get_card_store
from vocabdeck.schemas.folder import FolderCreate, FolderResponse
from vocabdeck.services.card_store_service import CardStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/folders", tags=["folders"])


def _to_response(store: CardStore, folder) -> FolderResponse:
    return FolderResponse(
        id=folder.id,
        name=folder.name,
        card_count=len(store.cards_in_folder(folder.id)),
    )


@router.get("", response_model=List[FolderResponse])
async def list_folders(store: CardStore = Depends(get_card_store)):
    """List folders sorted by name, with the number of cards in each."""
    folders = sorted(store.folders, key=lambda f: f.name.lower())
    return [_to_response(store, folder) for folder in folders]


@router.post("", response_model=FolderResponse, status_code=status.HTTP_201_CREATED)
async def create_folder(request: FolderCreate, store: CardStore = Depends(get_card_store)):
    folder = store.create_folder(request.name)
    logger.info(f"Created folder {folder.id} ('{folder.name}')")
    return _to_response(store, folder)


@router.delete("/{folder_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_folder(folder_id: str, store: CardStore = Depends(get_card_store)):
    """Delete a folder. Its cards are kept and become ungrouped."""
    folder = store.delete_folder(folder_id)
    logger.info(f"Deleted folder {folder_id} ('{folder.name}')")
