"""
SRS (Spaced Repetition System) service.

Cards climb a fixed interval table on every correct answer and fall back to
the bottom on any mistake. All date arithmetic happens at day granularity:
"today" is local midnight, so reviews at 08:00 and 23:00 on the same day
produce the same schedule.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Union

from vocabdeck.models.card import Card
from vocabdeck.models.enums import ReviewOutcome
from vocabdeck.utils.date_utils import days_from, local_now, normalize_day, start_of_day

logger = logging.getLogger(__name__)


# Review intervals in days, indexed by strength (consecutive correct answers).
# Strength 0 = 1 day, 1 = 3 days, 2 = 7 days, 3 = 16 days, 4 = 35 days, 5+ = 90 days
INTERVAL_TABLE = [1, 3, 7, 16, 35, 90]
FAILED_INTERVAL_DAYS = 1


@dataclass(frozen=True)
class SchedulingUpdate:
    """New scheduling fields for a card after one review."""
    strength: int
    interval_days: int
    next_review_at: datetime


def interval_for_strength(strength: int) -> int:
    """
    Look up the review interval for a strength, saturating at the last entry.

    Args:
        strength: Consecutive correct answers (>= 0)

    Returns:
        Interval in days
    """
    return INTERVAL_TABLE[min(strength, len(INTERVAL_TABLE) - 1)]


def schedule(
    card: Card,
    outcome: Union[ReviewOutcome, str],
    now: Optional[datetime] = None
) -> SchedulingUpdate:
    """
    Compute the next scheduling fields for a card given a review outcome.

    - incorrect: strength resets to 0, interval to 1 day, due tomorrow
    - correct: strength + 1, interval from INTERVAL_TABLE, due today + interval

    The card itself is not modified; commit the result through the card store.

    Args:
        card: Card being reviewed
        outcome: ReviewOutcome (or its string value)
        now: Review time (defaults to current local time)

    Returns:
        SchedulingUpdate with the new strength, interval and due date
    """
    outcome = ReviewOutcome(outcome)
    today = start_of_day(now)

    if outcome is ReviewOutcome.INCORRECT:
        return SchedulingUpdate(
            strength=0,
            interval_days=FAILED_INTERVAL_DAYS,
            next_review_at=days_from(today, FAILED_INTERVAL_DAYS),
        )

    new_strength = card.strength + 1
    new_interval = interval_for_strength(new_strength)
    return SchedulingUpdate(
        strength=new_strength,
        interval_days=new_interval,
        next_review_at=days_from(today, new_interval),
    )


def is_due(card: Card, now: Optional[datetime] = None) -> bool:
    """A card is due when its review day is on or before today."""
    if now is None:
        now = local_now()
    return normalize_day(card.next_review_at) <= normalize_day(now)


def select_due(cards: Iterable[Card], now: Optional[datetime] = None) -> List[Card]:
    """
    Select the cards due for review, keeping their original order.

    Pure: never mutates the cards, so calling it repeatedly gives the same
    answer until the cards or the date change.

    Args:
        cards: All cards in the store
        now: Reference time (defaults to current local time)

    Returns:
        List of due cards
    """
    if now is None:
        now = local_now()
    return [card for card in cards if is_due(card, now)]


def count_due(cards: Iterable[Card], now: Optional[datetime] = None) -> int:
    """Number of cards due for review."""
    return len(select_due(cards, now))
