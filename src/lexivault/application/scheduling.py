"""
Scheduling policy for the review ladder.

Table-driven: ``TRANSITIONS`` maps (current status, knew_it) to the next
status, and ``IntervalTable`` maps the resulting status (or the forgot case)
to the offset added to ``now``. This is a pure computation module with no I/O
and no clock reads.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from lexivault.domain.constants import (
    FAST_MASTERY_WINDOW,
    FORGOT_INTERVAL,
    LEARNING_INTERVAL,
    MASTERED_INTERVAL,
    NEW_INTERVAL,
)
from lexivault.domain.models import AnswerOutcome, Item, ItemStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntervalTable:
    """Offsets from the answer instant to the next due instant."""

    new: timedelta = NEW_INTERVAL
    learning: timedelta = LEARNING_INTERVAL
    mastered: timedelta = MASTERED_INTERVAL
    forgot: timedelta = FORGOT_INTERVAL

    def for_status(self, status: ItemStatus) -> timedelta:
        return {
            ItemStatus.NEW: self.new,
            ItemStatus.LEARNING: self.learning,
            ItemStatus.MASTERED: self.mastered,
        }[status]


DEFAULT_INTERVALS = IntervalTable()

# MASTERED is terminal but still revisited: a correct answer keeps it MASTERED.
TRANSITIONS: dict[tuple[ItemStatus, bool], ItemStatus] = {
    (ItemStatus.NEW, True): ItemStatus.LEARNING,
    (ItemStatus.LEARNING, True): ItemStatus.MASTERED,
    (ItemStatus.MASTERED, True): ItemStatus.MASTERED,
    (ItemStatus.NEW, False): ItemStatus.NEW,
    (ItemStatus.LEARNING, False): ItemStatus.NEW,
    (ItemStatus.MASTERED, False): ItemStatus.NEW,
}


def next_status(status: ItemStatus, knew_it: bool) -> ItemStatus:
    return TRANSITIONS[(status, knew_it)]


def apply_answer(
    item: Item,
    knew_it: bool,
    now: datetime,
    intervals: IntervalTable = DEFAULT_INTERVALS,
) -> AnswerOutcome:
    """
    Apply one recall outcome to an item.

    Args:
        item: Current item state.
        knew_it: Whether the learner recalled the item.
        now: Answer instant. The only time source this function uses.
        intervals: Interval table; defaults to the standard 1d/3d/10d/10m.

    Returns:
        AnswerOutcome with the rescheduled item and the fast-mastery flag.
    """
    status = next_status(item.status, knew_it)

    if knew_it:
        next_due_at = now + intervals.for_status(status)
    else:
        next_due_at = now + intervals.forgot

    fast_mastery = (
        knew_it
        and status is ItemStatus.MASTERED
        and item.status is not ItemStatus.MASTERED
        and now - item.created_at < FAST_MASTERY_WINDOW
    )

    logger.debug(
        f"Item {item.id}: {item.status.value} -> {status.value}, due {next_due_at.isoformat()}"
    )

    return AnswerOutcome(
        item=replace(item, status=status, next_due_at=next_due_at),
        previous_status=item.status,
        fast_mastery=fast_mastery,
    )


def count_mastered(items: list[Item]) -> int:
    return sum(1 for item in items if item.status is ItemStatus.MASTERED)
