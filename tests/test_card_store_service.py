"""
Tests for the in-memory card store.
"""
from datetime import timedelta

import pytest

from vocabdeck.core.exceptions import NotFoundError, ValidationError
from vocabdeck.services.card_store_service import CardStore
from vocabdeck.services.srs_service import SchedulingUpdate


class TestCards:

    def test_new_cards_go_first(self, store, make_card):
        old = store.add(make_card("old"))
        new = store.add(make_card("new"))
        assert store.cards == [new, old]

    def test_add_many_keeps_order_before_existing(self, store, make_card):
        existing = store.add(make_card("existing"))
        imported = store.add_many([make_card("one"), make_card("two")])
        assert store.cards == imported + [existing]

    def test_add_rejects_duplicate_id(self, store, make_card):
        card = store.add(make_card("apple"))
        with pytest.raises(ValidationError):
            store.add(make_card("apple again", id=card.id))

    def test_add_many_rejects_duplicate_ids_within_the_batch(self, store, make_card):
        first = make_card("one")
        with pytest.raises(ValidationError):
            store.add_many([first, make_card("two"), make_card("one again", id=first.id)])
        assert len(store) == 0
        assert store.revision == 0

    def test_get_missing_card(self, store):
        with pytest.raises(NotFoundError):
            store.get("missing")

    def test_remove(self, store, make_card):
        card = store.add(make_card("apple"))
        store.remove(card.id)
        assert card.id not in store
        assert len(store) == 0

    def test_update_content(self, store, make_card):
        card = store.add(make_card("apple"))
        store.update_content(card.id, word="  Apple ", explanation="a fruit")
        assert card.word == "Apple"
        assert card.explanation == "a fruit"

    def test_update_content_rejects_scheduling_fields(self, store, make_card):
        card = store.add(make_card("apple"))
        with pytest.raises(ValidationError):
            store.update_content(card.id, strength=4)
        assert card.strength == 0

    def test_update_content_rejects_blank_word(self, store, make_card):
        card = store.add(make_card("apple"))
        with pytest.raises(ValidationError):
            store.update_content(card.id, meaning="   ")

    def test_update_content_rejects_unknown_field(self, store, make_card):
        card = store.add(make_card("apple"))
        with pytest.raises(ValidationError):
            store.update_content(card.id, colour="red")

    def test_commit_schedule(self, store, make_card, now):
        card = store.add(make_card("apple"))
        update = SchedulingUpdate(strength=2, interval_days=7, next_review_at=now + timedelta(days=7))

        store.commit_schedule(card.id, update)

        assert (card.strength, card.interval_days, card.next_review_at) == (2, 7, now + timedelta(days=7))


class TestFolders:

    def test_move_and_delete_folder(self, store, make_card):
        folder = store.create_folder("Fruit")
        apple = store.add(make_card("apple"))
        pear = store.add(make_card("pear"))

        store.move_to_folder([apple.id, pear.id], folder.id)
        assert store.cards_in_folder(folder.id) == [pear, apple]

        store.delete_folder(folder.id)
        assert store.folders == []
        assert apple.folder_id is None and pear.folder_id is None

    def test_move_out_of_folder(self, store, make_card):
        folder = store.create_folder("Fruit")
        apple = store.add(make_card("apple", folder_id=folder.id))

        store.move_to_folder([apple.id], None)

        assert store.cards_in_folder(None) == [apple]

    def test_unknown_folder(self, store, make_card):
        apple = store.add(make_card("apple"))
        with pytest.raises(NotFoundError):
            store.move_to_folder([apple.id], "nope")
        with pytest.raises(NotFoundError):
            store.add(make_card("pear", folder_id="nope"))

    def test_blank_folder_name(self, store):
        with pytest.raises(ValidationError):
            store.create_folder("  ")


class TestChangeNotification:

    def test_every_mutation_notifies(self, make_card, now):
        calls = []
        store = CardStore(on_change=calls.append)

        card = store.add(make_card("apple"))
        store.update_content(card.id, meaning="fruit")
        store.commit_schedule(card.id, SchedulingUpdate(1, 3, now))
        folder = store.create_folder("Fruit")
        store.move_to_folder([card.id], folder.id)
        store.delete_folder(folder.id)
        store.remove(card.id)

        assert len(calls) == 7
        assert all(c is store for c in calls)
        assert store.revision == 7

    def test_listener_failure_rolls_back(self, make_card, now):
        saving = {"fail": False}

        def save(store):
            if saving["fail"]:
                raise RuntimeError("disk full")

        store = CardStore(on_change=save)
        apple = store.add(make_card("apple"))
        folder = store.create_folder("Fruit")
        saving["fail"] = True

        with pytest.raises(RuntimeError):
            store.add_many([make_card("pear")])
        with pytest.raises(RuntimeError):
            store.update_content(apple.id, meaning="changed", ai_explanation="new")
        with pytest.raises(RuntimeError):
            store.commit_schedule(apple.id, SchedulingUpdate(3, 16, now + timedelta(days=16)))
        with pytest.raises(RuntimeError):
            store.move_to_folder([apple.id], folder.id)
        with pytest.raises(RuntimeError):
            store.delete_folder(folder.id)
        with pytest.raises(RuntimeError):
            store.remove(apple.id)

        assert store.cards == [apple]
        assert store.folders == [folder]
        assert apple.meaning == "meaning of apple" and apple.ai_explanation is None
        assert (apple.strength, apple.interval_days, apple.next_review_at) == (0, 1, now)
        assert apple.folder_id is None
        assert store.revision == 2

    def test_failed_mutation_does_not_notify(self, make_card):
        calls = []
        store = CardStore(on_change=calls.append)
        with pytest.raises(NotFoundError):
            store.remove("missing")
        assert calls == []
        assert store.revision == 0
