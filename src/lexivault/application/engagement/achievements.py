"""
Achievement table and unlock sweep.

The sweep is pure and idempotent: it only ever adds identifiers to
``unlocked_achievements`` and never revokes one, so it is safe to run on every
state change.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Literal

from lexivault.domain.models import EngagementCounts, UserStats

logger = logging.getLogger(__name__)

Category = Literal["milestone", "streak", "perfection"]


@dataclass(frozen=True)
class Achievement:
    """
    A single unlockable achievement.

    Attributes:
        id: Stable identifier stored in ``UserStats.unlocked_achievements``.
        predicate: Evaluated against aggregate counts by the sweep. ``None``
            marks an event-driven achievement unlocked via ``unlock``.
    """

    id: str
    title: str
    description: str
    category: Category
    predicate: Callable[[EngagementCounts], bool] | None = None


QUICK_LEARNER = "quick_learner"

ACHIEVEMENTS: tuple[Achievement, ...] = (
    # Milestones
    Achievement("first_memory", "First Memory Forged", "Created your first flashcard.",
                "milestone", lambda c: c.item_count >= 1),
    Achievement("word_warrior", "Vocabulary Warrior", "Added 100 words to your library.",
                "milestone", lambda c: c.item_count >= 100),
    Achievement("librarian", "Librarian", "Added 500 words to your library.",
                "milestone", lambda c: c.item_count >= 500),
    Achievement("word_hunter", "Word Hunter", "Added 1000 words to your library.",
                "milestone", lambda c: c.item_count >= 1000),
    Achievement("collector", "The Collector", "Created your first collection.",
                "milestone", lambda c: c.collection_count >= 1),
    Achievement("polymath", "The Polymath", "Organized words into 5 collections.",
                "milestone", lambda c: c.collection_count >= 5),
    # Streaks
    Achievement("bronze_mind", "Bronze Mind", "Maintained a 3-day study streak.",
                "streak", lambda c: c.streak >= 3),
    Achievement("silver_mind", "Silver Mind", "Maintained a 7-day study streak.",
                "streak", lambda c: c.streak >= 7),
    Achievement("gold_mind", "Gold Mind", "Maintained a 14-day study streak.",
                "streak", lambda c: c.streak >= 14),
    Achievement("diamond_mind", "Diamond Mind", "Maintained a 30-day study streak.",
                "streak", lambda c: c.streak >= 30),
    Achievement("mythic_mind", "Mythic Mind", "Achieve a 60-day streak.",
                "streak", lambda c: c.streak >= 60),
    # Perfection
    Achievement("rising_intellect", "Rising Intellect", "Mastered 10 cards in total.",
                "perfection", lambda c: c.mastered_count >= 10),
    Achievement(QUICK_LEARNER, "Quick Learner", "Mastered a word within 3 days.",
                "perfection"),
    Achievement("prodigy", "Prodigy", "Mastered 100 words.",
                "perfection", lambda c: c.mastered_count >= 100),
)


def newly_satisfied(
    stats: UserStats,
    counts: EngagementCounts,
    table: tuple[Achievement, ...] = ACHIEVEMENTS,
) -> list[str]:
    """IDs whose predicate holds for ``counts`` and that are not yet unlocked."""
    unlocked = set(stats.unlocked_achievements)
    return [
        a.id
        for a in table
        if a.predicate is not None and a.id not in unlocked and a.predicate(counts)
    ]


def evaluate_achievements(
    stats: UserStats,
    counts: EngagementCounts,
    table: tuple[Achievement, ...] = ACHIEVEMENTS,
) -> UserStats:
    """Union newly satisfied achievements into the aggregate."""
    new_ids = newly_satisfied(stats, counts, table)
    if not new_ids:
        return stats

    logger.info(f"Unlocked achievements: {', '.join(new_ids)}")
    return replace(stats, unlocked_achievements=stats.unlocked_achievements + tuple(new_ids))


def unlock(stats: UserStats, achievement_id: str) -> UserStats:
    """Unlock an event-driven achievement. Idempotent."""
    if achievement_id in stats.unlocked_achievements:
        return stats

    logger.info(f"Unlocked achievement: {achievement_id}")
    return replace(stats, unlocked_achievements=stats.unlocked_achievements + (achievement_id,))
