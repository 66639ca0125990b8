"""
Daily mission generator.

A mission is a uniform random sample of the due queue, created at most once
per calendar day and frozen for the rest of that day.
"""

import logging
import math
import random
from collections.abc import Sequence
from dataclasses import replace

from lexivault.domain.constants import MISSION_MIN_SIZE, MISSION_RATIO
from lexivault.domain.models import DailyMission, Item, UserStats

logger = logging.getLogger(__name__)


def mission_size(
    due_count: int,
    min_size: int = MISSION_MIN_SIZE,
    ratio: float = MISSION_RATIO,
) -> int:
    """
    Compute ``max(min_size, ceil(ratio * due_count))`` capped at ``due_count``.

    There is no upper bound beyond the queue length itself.
    """
    if due_count <= 0:
        return 0
    # Strip float noise before ceil.
    return min(due_count, max(min_size, math.ceil(round(ratio * due_count, 9))))


def ensure_mission(
    stats: UserStats,
    due_items: Sequence[Item],
    today: str,
    rng: random.Random | None = None,
    min_size: int = MISSION_MIN_SIZE,
    ratio: float = MISSION_RATIO,
) -> UserStats:
    """
    Make sure a mission exists for ``today``.

    Args:
        stats: Current aggregate.
        due_items: Due queue at creation time.
        today: Calendar-day key.
        rng: Random source; sampling is without replacement and unbiased.

    Returns:
        ``stats`` unchanged if today's mission already exists or nothing is
        due, otherwise a copy carrying a fresh mission that replaces any
        stale one.
    """
    if stats.daily_mission is not None and stats.daily_mission.date == today:
        return stats

    if not due_items:
        return stats

    rng = rng or random.Random()
    size = mission_size(len(due_items), min_size=min_size, ratio=ratio)
    sample = rng.sample(list(due_items), size)

    mission = DailyMission(
        date=today,
        item_ids=tuple(item.id for item in sample),
        completed=False,
    )
    logger.info(f"Created mission for {today} with {size} of {len(due_items)} due item(s)")

    return replace(stats, daily_mission=mission)


def complete_mission(stats: UserStats) -> UserStats:
    """Mark the current mission completed. No-op when there is no mission."""
    if stats.daily_mission is None or stats.daily_mission.completed:
        return stats
    return replace(stats, daily_mission=replace(stats.daily_mission, completed=True))


def mission_available(stats: UserStats) -> bool:
    mission = stats.daily_mission
    return mission is not None and not mission.completed and bool(mission.item_ids)
