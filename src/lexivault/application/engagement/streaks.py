"""
Streak and study-history bookkeeping.

Pure functions over the aggregate stats and the history list. Only the first
review of a calendar day advances the streak.
"""

from dataclasses import replace

from lexivault.domain.days import previous_day_key
from lexivault.domain.models import StudyHistoryEntry, UserStats


def record_review(stats: UserStats, today: str, reset_on_gap: bool = False) -> UserStats:
    """
    Register that a review happened on ``today``.

    Args:
        stats: Current aggregate.
        today: Calendar-day key of the review.
        reset_on_gap: When set, a missed day restarts the streak at 1 instead
            of continuing it.

    Returns:
        Updated aggregate with ``last_study_date = today`` and
        ``longest_streak`` raised if needed.
    """
    streak = stats.streak
    if stats.last_study_date != today:
        if (
            reset_on_gap
            and stats.last_study_date is not None
            and stats.last_study_date != previous_day_key(today)
        ):
            streak = 1
        else:
            streak += 1

    return replace(
        stats,
        streak=streak,
        last_study_date=today,
        longest_streak=max(stats.longest_streak, streak),
    )


def record_history(history: list[StudyHistoryEntry], today: str) -> list[StudyHistoryEntry]:
    """Increment today's entry, or append one with count 1."""
    updated: list[StudyHistoryEntry] = []
    found = False

    for entry in history:
        if entry.date == today:
            entry = replace(entry, count=entry.count + 1)
            found = True
        updated.append(entry)

    if not found:
        updated.append(StudyHistoryEntry(date=today, count=1))

    return updated


def total_reviews(history: list[StudyHistoryEntry]) -> int:
    return sum(entry.count for entry in history)
