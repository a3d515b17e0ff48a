"""
Study session engine.

A session walks through a shuffled copy of the due cards. Cards answered
correctly leave the session; cards answered incorrectly go to the back of the
line and come around again. The session keeps only card ids and a cursor:
the card store stays the single source of truth for every card field.
"""
import logging
import random
from datetime import datetime
from typing import FrozenSet, List, Optional, Tuple, Union

from vocabdeck.core.exceptions import SessionStateError
from vocabdeck.models.card import Card
from vocabdeck.models.enums import ReviewOutcome, SessionState
from vocabdeck.services.card_store_service import CardStore
from vocabdeck.services.srs_service import schedule, select_due

logger = logging.getLogger(__name__)


class StudySession:
    """
    State machine over {EMPTY, IN_PROGRESS, COMPLETE}.

    EMPTY until start() runs. start() moves to COMPLETE when nothing is due,
    otherwise to IN_PROGRESS with a shuffled working list. review() moves to
    COMPLETE once the working list empties. refresh() restarts the session
    whenever the due set in the store changed behind the session's back.
    """

    def __init__(self, store: CardStore, rng: Optional[random.Random] = None):
        self.store = store
        self._rng = rng if rng is not None else random.Random()
        self.state = SessionState.EMPTY
        self.is_flipped = False
        self._working: List[str] = []
        self._cursor = 0
        self._due_ids: FrozenSet[str] = frozenset()

    @property
    def working_ids(self) -> Tuple[str, ...]:
        """Card ids still to be answered, in presentation order."""
        return tuple(self._working)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def remaining(self) -> int:
        return len(self._working)

    @property
    def current_card(self) -> Optional[Card]:
        if self.state is not SessionState.IN_PROGRESS:
            return None
        return self.store.get(self._working[self._cursor])

    def start(self, now: Optional[datetime] = None) -> SessionState:
        """
        (Re)initialize the session from the cards currently due.

        Args:
            now: Reference time for due selection (defaults to now)

        Returns:
            The new session state
        """
        due_ids = [card.id for card in select_due(self.store.cards, now)]
        self._due_ids = frozenset(due_ids)
        self._cursor = 0
        self.is_flipped = False

        if not due_ids:
            self._working = []
            self.state = SessionState.COMPLETE
            logger.info("Study session started: no cards due")
            return self.state

        self._rng.shuffle(due_ids)
        self._working = due_ids
        self.state = SessionState.IN_PROGRESS
        logger.info(f"Study session started with {len(due_ids)} due card(s)")
        return self.state

    def refresh(self, now: Optional[datetime] = None) -> bool:
        """
        Restart the session if the store no longer matches it.

        That happens when the due set differs from the one the session last
        saw (cards added, removed or rescheduled elsewhere, or the day rolled
        over), or when a card in the working list was deleted.

        Returns:
            True if the session was restarted
        """
        if self.state is SessionState.EMPTY:
            self.start(now)
            return True

        due_ids = frozenset(card.id for card in select_due(self.store.cards, now))
        missing = [card_id for card_id in self._working if card_id not in self.store]
        if due_ids == self._due_ids and not missing:
            return False

        logger.info(
            f"Due set changed outside the session ({len(self._due_ids)} -> {len(due_ids)} due, "
            f"{len(missing)} missing), restarting"
        )
        self.start(now)
        return True

    def flip(self) -> bool:
        """Toggle the front/back of the current card. No scheduling effect."""
        self._require_in_progress("flip")
        self.is_flipped = not self.is_flipped
        return self.is_flipped

    def review(self, outcome: Union[ReviewOutcome, str], now: Optional[datetime] = None) -> Card:
        """
        Answer the current card.

        The card is rescheduled in the store, then removed from the working
        list (correct) or moved to its end (incorrect). The cursor stays at
        the same index, which now holds the next card, wrapping to the start.

        Args:
            outcome: ReviewOutcome (or its string value)
            now: Review time (defaults to now)

        Returns:
            The reviewed card with its committed scheduling fields

        Raises:
            SessionStateError: If the session is not in progress
        """
        self._require_in_progress("review")
        outcome = ReviewOutcome(outcome)

        card_id = self._working[self._cursor]
        update = schedule(self.store.get(card_id), outcome, now)
        card = self.store.commit_schedule(card_id, update)

        self._working.pop(self._cursor)
        if outcome is ReviewOutcome.INCORRECT:
            self._working.append(card_id)

        # Our own commit changed the due set; remember it so refresh() ignores it
        self._due_ids = frozenset(c.id for c in select_due(self.store.cards, now))

        if not self._working:
            self.state = SessionState.COMPLETE
            self._cursor = 0
            self.is_flipped = False
            logger.info("Study session complete")
            return card

        self._cursor = self._cursor % len(self._working)
        self.is_flipped = False
        return card

    def _require_in_progress(self, action: str) -> None:
        if self.state is not SessionState.IN_PROGRESS:
            raise SessionStateError(f"Cannot {action}: study session is {self.state.value}")
