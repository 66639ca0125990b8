"""
Queue builders for study sessions.

Selects the items due at a given instant and resolves a daily mission
against the live item collection.
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from lexivault.domain.models import DailyMission, Item

logger = logging.getLogger(__name__)


def select_due(items: Iterable[Item], now: datetime) -> list[Item]:
    """
    Return the items whose next review instant has passed.

    Pure O(n) filter; input order is preserved so the result is stable for a
    given input.
    """
    return [item for item in items if item.next_due_at <= now]


def resolve_mission(mission: DailyMission | None, items: Iterable[Item]) -> list[Item]:
    """
    Resolve mission item IDs against the live collection.

    IDs that no longer exist (deleted since the mission was created) are
    skipped silently. Mission order is preserved.
    """
    if mission is None:
        return []

    by_id = {item.id: item for item in items}
    resolved = [by_id[item_id] for item_id in mission.item_ids if item_id in by_id]

    skipped = len(mission.item_ids) - len(resolved)
    if skipped:
        logger.debug(f"Mission {mission.date}: skipped {skipped} missing item(s)")

    return resolved
