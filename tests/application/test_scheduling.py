"""Tests for the scheduling policy."""

from datetime import timedelta

import pytest

from lexivault.application.scheduling import (
    DEFAULT_INTERVALS,
    TRANSITIONS,
    IntervalTable,
    apply_answer,
    count_mastered,
)
from lexivault.domain.models import ItemStatus


class TestTransitionTable:
    def test_table_is_exhaustive(self):
        for status in ItemStatus:
            for knew_it in (True, False):
                assert (status, knew_it) in TRANSITIONS

    @pytest.mark.parametrize(
        "before,after",
        [
            (ItemStatus.NEW, ItemStatus.LEARNING),
            (ItemStatus.LEARNING, ItemStatus.MASTERED),
            (ItemStatus.MASTERED, ItemStatus.MASTERED),
        ],
    )
    def test_correct_answer_ladder(self, make_item, t0, before, after):
        outcome = apply_answer(make_item(status=before), True, t0)
        assert outcome.item.status is after
        assert outcome.previous_status is before


class TestCorrectAnswer:
    @pytest.mark.parametrize("status", list(ItemStatus))
    def test_due_strictly_in_future_and_no_regression(self, make_item, t0, status):
        item = make_item(status=status)
        outcome = apply_answer(item, True, t0)

        assert outcome.item.next_due_at > t0
        assert outcome.item.status.rank >= item.status.rank

    def test_interval_matches_resulting_status(self, make_item, t0):
        assert apply_answer(make_item(status=ItemStatus.NEW), True, t0).item.next_due_at == (
            t0 + timedelta(days=3)
        )
        assert apply_answer(
            make_item(status=ItemStatus.LEARNING), True, t0
        ).item.next_due_at == t0 + timedelta(days=10)

    def test_mastered_stays_mastered_and_is_rescheduled(self, make_item, t0):
        item = make_item(status=ItemStatus.MASTERED, created_at=t0 - timedelta(days=1))
        outcome = apply_answer(item, True, t0)

        assert outcome.item.status is ItemStatus.MASTERED
        assert outcome.item.next_due_at == t0 + timedelta(days=10)
        # Already mastered: no fast-mastery event even inside the window
        assert outcome.fast_mastery is False

    def test_display_fields_untouched(self, make_item, t0):
        item = make_item(example="ex", ipa="ipa", tags=("a",))
        updated = apply_answer(item, True, t0).item
        assert (updated.id, updated.term, updated.example, updated.ipa, updated.tags) == (
            item.id, item.term, "ex", "ipa", ("a",)
        )
        assert updated.created_at == item.created_at


class TestIncorrectAnswer:
    @pytest.mark.parametrize("status", list(ItemStatus))
    def test_resets_to_new_with_short_cooldown(self, make_item, t0, status):
        outcome = apply_answer(make_item(status=status), False, t0)

        assert outcome.item.status is ItemStatus.NEW
        assert outcome.item.next_due_at == t0 + timedelta(minutes=10)
        assert outcome.fast_mastery is False

    def test_learning_lapse_discards_progress(self, make_item, t0):
        item = make_item(status=ItemStatus.LEARNING, next_due_at=t0 + timedelta(days=2))
        outcome = apply_answer(item, False, t0)
        assert outcome.item.status is ItemStatus.NEW
        assert outcome.item.next_due_at == t0 + timedelta(minutes=10)


class TestFastMastery:
    def test_full_scenario(self, make_item, t0):
        item = make_item(created_at=t0, next_due_at=t0)

        first = apply_answer(item, True, t0)
        assert first.item.status is ItemStatus.LEARNING
        assert first.item.next_due_at == t0 + timedelta(days=3)
        assert first.fast_mastery is False

        answered_at = t0 + timedelta(days=2)
        second = apply_answer(first.item, True, answered_at)
        assert second.item.status is ItemStatus.MASTERED
        assert second.item.next_due_at == answered_at + timedelta(days=10)
        assert second.fast_mastery is True

    def test_no_event_at_or_after_three_days(self, make_item, t0):
        item = make_item(status=ItemStatus.LEARNING, created_at=t0)
        outcome = apply_answer(item, True, t0 + timedelta(days=3))
        assert outcome.item.status is ItemStatus.MASTERED
        assert outcome.fast_mastery is False


def test_custom_interval_table(make_item, t0):
    table = IntervalTable(learning=timedelta(hours=1), forgot=timedelta(minutes=1))
    assert apply_answer(make_item(), True, t0, table).item.next_due_at == t0 + timedelta(hours=1)
    assert apply_answer(make_item(), False, t0, table).item.next_due_at == t0 + timedelta(minutes=1)


def test_default_intervals():
    assert DEFAULT_INTERVALS.new == timedelta(days=1)
    assert DEFAULT_INTERVALS.learning == timedelta(days=3)
    assert DEFAULT_INTERVALS.mastered == timedelta(days=10)
    assert DEFAULT_INTERVALS.forgot == timedelta(minutes=10)


def test_apply_answer_is_deterministic(make_item, t0):
    item = make_item(status=ItemStatus.LEARNING)
    assert apply_answer(item, True, t0) == apply_answer(item, True, t0)


def test_count_mastered(make_item):
    items = [
        make_item(status=ItemStatus.MASTERED),
        make_item(status=ItemStatus.LEARNING),
        make_item(status=ItemStatus.MASTERED),
    ]
    assert count_mastered(items) == 2
