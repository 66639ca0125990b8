"""
Domain models for vocabulary items and learner progress.

These are pure data structures with no I/O or external dependencies.
Every model is frozen: state changes produce new instances via
``dataclasses.replace`` so the scheduling core stays side-effect free.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ItemStatus(str, Enum):
    """Review lifecycle of an item. Ordered NEW < LEARNING < MASTERED."""

    NEW = "NEW"
    LEARNING = "LEARNING"
    MASTERED = "MASTERED"

    @property
    def rank(self) -> int:
        return _STATUS_RANK[self]


_STATUS_RANK = {ItemStatus.NEW: 0, ItemStatus.LEARNING: 1, ItemStatus.MASTERED: 2}


@dataclass(frozen=True)
class Item:
    """
    A single learnable term/definition pair with its scheduling state.

    Attributes:
        id: Opaque unique identifier.
        term: The word or phrase being learned.
        definition: Its meaning.
        status: Position on the review ladder.
        next_due_at: The item is due once ``now >= next_due_at``.
        created_at: Creation instant, never changes after entry.
    """

    id: str
    term: str
    definition: str
    status: ItemStatus
    next_due_at: datetime
    created_at: datetime

    # Display-only fields, inert to scheduling
    example: str = ""
    ipa: str | None = None
    tags: tuple[str, ...] = ()
    image_url: str | None = None
    is_favorite: bool = False


@dataclass(frozen=True)
class DailyMission:
    """
    A frozen, once-per-day subset of due items.

    Attributes:
        date: Calendar-day key (YYYY-MM-DD) the mission belongs to.
        item_ids: Sampled item IDs, in presentation order.
        completed: Set once a mission or recovery session finishes.
    """

    date: str
    item_ids: tuple[str, ...]
    completed: bool = False


@dataclass(frozen=True)
class StudyHistoryEntry:
    date: str
    count: int


@dataclass(frozen=True)
class Collection:
    id: str
    name: str
    icon: str
    created_at: datetime
    item_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class UserStats:
    """
    Aggregate engagement record.

    Streak fields are only changed by the engagement evaluator; other
    components read them.
    """

    streak: int = 0
    longest_streak: int = 0
    last_study_date: str | None = None
    mastered_count: int = 0
    unlocked_achievements: tuple[str, ...] = ()
    daily_mission: DailyMission | None = None

    # Profile
    user_name: str = "Learner"
    joined_at: datetime | None = None
    total_items: int = 0
    first_item_id: str | None = None


@dataclass(frozen=True)
class AnswerOutcome:
    """Result of applying one answer to an item."""

    item: Item
    previous_status: ItemStatus
    fast_mastery: bool = False


@dataclass(frozen=True)
class EngagementCounts:
    """Aggregate counts that achievement predicates are evaluated against."""

    item_count: int
    mastered_count: int
    streak: int
    collection_count: int


@dataclass
class LearnerSnapshot:
    """Everything the engine reads from the stores, loaded together."""

    items: list[Item] = field(default_factory=list)
    stats: UserStats = field(default_factory=UserStats)
    history: list[StudyHistoryEntry] = field(default_factory=list)
    collections: list[Collection] = field(default_factory=list)
