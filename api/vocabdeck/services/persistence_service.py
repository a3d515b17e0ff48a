"""
Persistence service - loads and saves the whole deck.

The deck is stored as two tables (card, folder). Saving replaces the stored
lists with the in-memory ones: rows present in memory are upserted and rows
that disappeared are deleted. Each card's index in the deck is saved as its
position, so a reload gives back the same order.
"""
# pyright: reportAttributeAccessIssue=false
import logging
from typing import Iterable, List, Tuple

from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from vocabdeck.models.card import Card
from vocabdeck.models.folder import Folder
from vocabdeck.services.card_store_service import CardStore

logger = logging.getLogger(__name__)


def load_cards(session: Session) -> Tuple[List[Card], List[Folder]]:
    """
    Load every card, in the deck order it was saved with, and every folder.

    Args:
        session: Database session

    Returns:
        Tuple of (cards, folders)
    """
    statement = select(Card).order_by(Card.position, Card.created_at.desc())  # type: ignore
    cards = list(session.exec(statement).all())
    folders = list(session.exec(select(Folder)).all())
    # Detach so the in-memory store owns the objects after the session closes
    session.expunge_all()
    logger.info(f"Loaded {len(cards)} card(s) and {len(folders)} folder(s)")
    return cards, folders


def save_cards(session: Session, cards: Iterable[Card], folders: Iterable[Folder]) -> None:
    """
    Replace the stored deck with the given cards and folders.

    Args:
        session: Database session
        cards: All cards to keep
        folders: All folders to keep
    """
    cards = list(cards)
    folders = list(folders)
    card_ids = [card.id for card in cards]
    folder_ids = [folder.id for folder in folders]

    try:
        for folder in folders:
            session.merge(folder)
        session.flush()
        for position, card in enumerate(cards):
            card.position = position
            session.merge(card)
        for stale_card in session.exec(select(Card).where(Card.id.not_in(card_ids))).all():  # type: ignore
            session.delete(stale_card)
        session.flush()
        for stale_folder in session.exec(select(Folder).where(Folder.id.not_in(folder_ids))).all():  # type: ignore
            session.delete(stale_folder)
        session.commit()
    except Exception as e:
        session.rollback()
        logger.error(f"Failed to save deck: {str(e)}")
        raise
    logger.debug(f"Saved {len(cards)} card(s) and {len(folders)} folder(s)")


def load_store(engine: Engine, autosave: bool = True) -> CardStore:
    """
    Build a card store from the database.

    Args:
        engine: Database engine
        autosave: Save the whole deck after every store mutation

    Returns:
        CardStore holding the persisted deck
    """
    with Session(engine) as session:
        cards, folders = load_cards(session)

    def save_store(store: CardStore) -> None:
        with Session(engine) as session:
            save_cards(session, store.cards, store.folders)

    return CardStore(cards, folders, on_change=save_store if autosave else None)
