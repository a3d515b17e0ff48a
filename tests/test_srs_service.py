"""
Tests for the SRS scheduler and due-set selection.
"""
from datetime import datetime, timedelta

import pytest

from vocabdeck.models.enums import ReviewOutcome
from vocabdeck.services.srs_service import (
    INTERVAL_TABLE,
    count_due,
    interval_for_strength,
    is_due,
    schedule,
    select_due,
)


def midnight(value):
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


class TestIntervalTable:

    def test_table_is_unchanged(self):
        assert INTERVAL_TABLE == [1, 3, 7, 16, 35, 90]

    def test_interval_saturates_at_last_entry(self):
        assert interval_for_strength(5) == 90
        assert interval_for_strength(6) == 90
        assert interval_for_strength(50) == 90


class TestSchedule:

    @pytest.mark.parametrize("strength,interval", [(0, 1), (2, 7), (5, 90), (12, 90)])
    def test_incorrect_always_resets(self, make_card, now, strength, interval):
        card = make_card("apple", strength=strength, interval_days=interval)

        update = schedule(card, ReviewOutcome.INCORRECT, now)

        assert update.strength == 0
        assert update.interval_days == 1
        assert update.next_review_at == midnight(now) + timedelta(days=1)

    def test_correct_from_strength_two(self, make_card, now):
        card = make_card("apple", strength=2, interval_days=3)

        update = schedule(card, ReviewOutcome.CORRECT, now)

        assert update.strength == 3
        assert update.interval_days == 16
        assert update.next_review_at == midnight(now) + timedelta(days=16)

    def test_successive_correct_answers_climb_the_table(self, make_card, now):
        card = make_card("apple")
        intervals = []
        for _ in range(8):
            update = schedule(card, ReviewOutcome.CORRECT, now)
            card.strength = update.strength
            card.interval_days = update.interval_days
            intervals.append(update.interval_days)

        assert intervals == [3, 7, 16, 35, 90, 90, 90, 90]
        assert all(later >= earlier for earlier, later in zip(intervals, intervals[1:]))

    def test_time_of_day_does_not_matter(self, make_card):
        card = make_card("apple", strength=1)
        early = schedule(card, ReviewOutcome.CORRECT, datetime(2024, 3, 10, 0, 1))
        late = schedule(card, ReviewOutcome.CORRECT, datetime(2024, 3, 10, 23, 59))

        assert early == late
        assert early.next_review_at == datetime(2024, 3, 17)

    def test_does_not_mutate_card(self, make_card, now):
        card = make_card("apple", strength=3, interval_days=16)

        schedule(card, ReviewOutcome.CORRECT, now)
        schedule(card, ReviewOutcome.INCORRECT, now)

        assert card.strength == 3
        assert card.interval_days == 16
        assert card.next_review_at == now

    def test_accepts_string_outcome(self, make_card, now):
        update = schedule(make_card("apple"), "correct", now)
        assert update.strength == 1

    def test_rejects_unknown_outcome(self, make_card, now):
        with pytest.raises(ValueError):
            schedule(make_card("apple"), "maybe", now)


class TestSelectDue:

    def test_fresh_card_is_due_today(self, make_card, now):
        card = make_card("apple")
        assert select_due([card], now) == [card]

    def test_day_granularity(self, make_card, now):
        later_today = make_card("apple", next_review_at=now.replace(hour=23, minute=59))
        tomorrow = make_card("pear", next_review_at=midnight(now) + timedelta(days=1))

        assert select_due([later_today, tomorrow], now) == [later_today]

    def test_keeps_store_order(self, make_card, now):
        cards = [make_card(word) for word in ("a", "b", "c")]
        assert select_due(cards, now) == cards

    def test_idempotent_and_pure(self, make_card, now):
        cards = [
            make_card("apple"),
            make_card("pear", next_review_at=now + timedelta(days=3)),
        ]
        before = [(c.strength, c.interval_days, c.next_review_at) for c in cards]

        first = select_due(cards, now)
        second = select_due(cards, now)

        assert first == second
        assert [(c.strength, c.interval_days, c.next_review_at) for c in cards] == before

    def test_monotonic_in_time(self, make_card, now):
        card = make_card("apple", next_review_at=now + timedelta(days=2))

        assert not is_due(card, now)
        assert is_due(card, now + timedelta(days=2))
        assert is_due(card, now + timedelta(days=30))

    def test_count_due(self, make_card, now):
        cards = [
            make_card("apple"),
            make_card("pear"),
            make_card("plum", next_review_at=now + timedelta(days=1)),
        ]
        assert count_due(cards, now) == 2
        assert count_due([], now) == 0
