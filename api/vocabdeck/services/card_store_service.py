"""
In-memory card store.

The store is the single authoritative copy of every card and folder. It is
created by the host (see main.py), passed explicitly to whoever needs it, and
notifies an optional listener after every mutation so the host can persist.
A mutation whose listener fails is rolled back.
"""
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from vocabdeck.core.exceptions import NotFoundError, ValidationError
from vocabdeck.models.card import Card
from vocabdeck.models.folder import Folder
from vocabdeck.services.srs_service import SchedulingUpdate
from vocabdeck.utils.text_utils import require_text

logger = logging.getLogger(__name__)

# Fields callers may edit freely; scheduling fields go through commit_schedule
CONTENT_FIELDS = frozenset({"word", "meaning", "image_url", "ai_explanation", "explanation", "folder_id"})
SCHEDULING_FIELDS = frozenset({"strength", "interval_days", "next_review_at"})
TRACKED_FIELDS = CONTENT_FIELDS | SCHEDULING_FIELDS

# (cards in order, folders, per-card field values) taken before a mutation
Snapshot = Tuple[List[Card], List[Folder], List[Tuple[Card, Dict[str, Any]]]]


class CardStore:
    """Ordered collection of cards (newest first) plus folders."""

    def __init__(
        self,
        cards: Iterable[Card] = (),
        folders: Iterable[Folder] = (),
        on_change: Optional[Callable[["CardStore"], None]] = None
    ):
        self._cards: List[Card] = list(cards)
        self._folders: List[Folder] = list(folders)
        self._on_change = on_change
        self.revision = 0

    # Read access

    @property
    def cards(self) -> List[Card]:
        """Snapshot of all cards in store order."""
        return list(self._cards)

    @property
    def folders(self) -> List[Folder]:
        return list(self._folders)

    def __len__(self) -> int:
        return len(self._cards)

    def __contains__(self, card_id: str) -> bool:
        return self._find(card_id) is not None

    def get(self, card_id: str) -> Card:
        card = self._find(card_id)
        if card is None:
            raise NotFoundError(f"Card with id {card_id} not found")
        return card

    def cards_in_folder(self, folder_id: Optional[str]) -> List[Card]:
        """Cards in a folder; None selects cards without a folder."""
        return [card for card in self._cards if card.folder_id == folder_id]

    def get_folder(self, folder_id: str) -> Folder:
        for folder in self._folders:
            if folder.id == folder_id:
                return folder
        raise NotFoundError(f"Folder with id {folder_id} not found")

    # Card mutations

    def add(self, card: Card) -> Card:
        """Add a card at the front of the deck."""
        return self.add_many([card])[0]

    def add_many(self, cards: Iterable[Card]) -> List[Card]:
        """Add several cards at the front of the deck, keeping their order."""
        new_cards = list(cards)
        seen = set()
        for card in new_cards:
            if card.id in self or card.id in seen:
                raise ValidationError(f"Card with id {card.id} already exists")
            seen.add(card.id)
            if card.folder_id is not None:
                self.get_folder(card.folder_id)
        snapshot = self._snapshot()
        self._cards[:0] = new_cards
        logger.info(f"Added {len(new_cards)} card(s), deck size is now {len(self._cards)}")
        self._changed(snapshot)
        return new_cards

    def update_content(self, card_id: str, **fields) -> Card:
        """
        Update non-scheduling fields of a card.

        Args:
            card_id: Card to update
            **fields: Any of word, meaning, image_url, ai_explanation, explanation, folder_id

        Returns:
            The updated card

        Raises:
            ValidationError: If a scheduling or unknown field is passed, or word/meaning is blank
            NotFoundError: If the card or target folder does not exist
        """
        forbidden = SCHEDULING_FIELDS.intersection(fields)
        if forbidden:
            raise ValidationError(
                f"Scheduling fields cannot be edited directly: {', '.join(sorted(forbidden))}"
            )
        unknown = set(fields) - CONTENT_FIELDS
        if unknown:
            raise ValidationError(f"Unknown card fields: {', '.join(sorted(unknown))}")

        card = self.get(card_id)
        try:
            if "word" in fields:
                fields["word"] = require_text(fields["word"], "word")
            if "meaning" in fields:
                fields["meaning"] = require_text(fields["meaning"], "meaning")
        except ValueError as e:
            raise ValidationError(str(e))
        if fields.get("folder_id") is not None:
            self.get_folder(fields["folder_id"])

        snapshot = self._snapshot()
        for name, value in fields.items():
            setattr(card, name, value)
        self._changed(snapshot)
        return card

    def remove(self, card_id: str) -> Card:
        card = self.get(card_id)
        snapshot = self._snapshot()
        self._cards.remove(card)
        logger.info(f"Removed card {card_id} ('{card.word}')")
        self._changed(snapshot)
        return card

    def commit_schedule(self, card_id: str, update: SchedulingUpdate) -> Card:
        """Write a scheduler result to a card. The only path that changes scheduling fields."""
        card = self.get(card_id)
        snapshot = self._snapshot()
        card.strength = update.strength
        card.interval_days = update.interval_days
        card.next_review_at = update.next_review_at
        logger.debug(
            f"Rescheduled card {card_id}: strength={update.strength}, "
            f"interval={update.interval_days}d, next_review_at={update.next_review_at}"
        )
        self._changed(snapshot)
        return card

    # Folder mutations

    def create_folder(self, name: str) -> Folder:
        try:
            name = require_text(name, "name")
        except ValueError as e:
            raise ValidationError(str(e))
        folder = Folder(name=name)
        snapshot = self._snapshot()
        self._folders.append(folder)
        self._changed(snapshot)
        return folder

    def delete_folder(self, folder_id: str) -> Folder:
        """Delete a folder; its cards become ungrouped."""
        folder = self.get_folder(folder_id)
        snapshot = self._snapshot()
        self._folders.remove(folder)
        for card in self._cards:
            if card.folder_id == folder_id:
                card.folder_id = None
        self._changed(snapshot)
        return folder

    def move_to_folder(self, card_ids: Iterable[str], folder_id: Optional[str]) -> List[Card]:
        """Move cards into a folder (None removes them from any folder)."""
        if folder_id is not None:
            self.get_folder(folder_id)
        moved = [self.get(card_id) for card_id in card_ids]
        snapshot = self._snapshot()
        for card in moved:
            card.folder_id = folder_id
        self._changed(snapshot)
        return moved

    # Internal helpers

    def _find(self, card_id: str) -> Optional[Card]:
        for card in self._cards:
            if card.id == card_id:
                return card
        return None

    def _snapshot(self) -> Snapshot:
        """Capture deck order, folders and every card's editable fields."""
        return (
            list(self._cards),
            list(self._folders),
            [(card, {name: getattr(card, name) for name in TRACKED_FIELDS}) for card in self._cards],
        )

    def _restore(self, snapshot: Snapshot) -> None:
        cards, folders, card_fields = snapshot
        self._cards = cards
        self._folders = folders
        for card, fields in card_fields:
            for name, value in fields.items():
                setattr(card, name, value)

    def _changed(self, snapshot: Snapshot) -> None:
        """
        Notify the listener of a mutation that has just been applied.

        If the listener fails (e.g. the deck could not be saved), the mutation
        is undone before the error propagates, so memory and storage agree.
        """
        if self._on_change is not None:
            try:
                self._on_change(self)
            except Exception as e:
                logger.error(f"Change listener failed, reverting store mutation: {str(e)}")
                self._restore(snapshot)
                raise
        self.revision += 1
