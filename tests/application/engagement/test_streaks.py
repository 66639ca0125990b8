"""Tests for streak and study-history bookkeeping."""

from lexivault.application.engagement import record_history, record_review
from lexivault.application.engagement.streaks import total_reviews
from lexivault.domain.models import StudyHistoryEntry, UserStats


def test_first_review_starts_streak():
    stats = record_review(UserStats(), "2024-03-10")
    assert stats.streak == 1
    assert stats.longest_streak == 1
    assert stats.last_study_date == "2024-03-10"


def test_five_reviews_same_day_increment_once():
    stats = UserStats(streak=4, longest_streak=4, last_study_date="2024-03-09")
    for _ in range(5):
        stats = record_review(stats, "2024-03-10")
    assert stats.streak == 5
    assert stats.longest_streak == 5


def test_consecutive_days():
    stats = UserStats()
    for day in ("2024-03-10", "2024-03-11", "2024-03-12"):
        stats = record_review(stats, day)
    assert stats.streak == 3


def test_longest_streak_never_decreases():
    stats = UserStats(streak=2, longest_streak=9, last_study_date="2024-03-09")
    stats = record_review(stats, "2024-03-10")
    assert stats.streak == 3
    assert stats.longest_streak == 9


def test_gap_continues_by_default():
    stats = UserStats(streak=3, longest_streak=3, last_study_date="2024-03-01")
    assert record_review(stats, "2024-03-10").streak == 4


def test_gap_resets_when_enabled():
    stats = UserStats(streak=3, longest_streak=3, last_study_date="2024-03-01")
    stats = record_review(stats, "2024-03-10", reset_on_gap=True)
    assert stats.streak == 1
    assert stats.longest_streak == 3


def test_reset_on_gap_keeps_consecutive_days():
    stats = UserStats(streak=3, longest_streak=3, last_study_date="2024-02-29")
    assert record_review(stats, "2024-03-01", reset_on_gap=True).streak == 4


def test_record_history_appends_then_increments():
    history = record_history([], "2024-03-10")
    assert history == [StudyHistoryEntry("2024-03-10", 1)]

    history = record_history(history, "2024-03-10")
    history = record_history(history, "2024-03-11")
    assert history == [
        StudyHistoryEntry("2024-03-10", 2),
        StudyHistoryEntry("2024-03-11", 1),
    ]
    assert total_reviews(history) == 3


def test_record_history_does_not_mutate_input():
    original = [StudyHistoryEntry("2024-03-10", 1)]
    record_history(original, "2024-03-10")
    assert original == [StudyHistoryEntry("2024-03-10", 1)]
