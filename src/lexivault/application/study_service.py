"""
Study Service — Application layer orchestrator.

Owns the learner's in-memory state, drives review sessions, applies the
scheduling policy to each answer, forwards outcomes to the engagement
evaluator and persists through the store ports.

In-memory state is always updated before the stores are written, so a
failed or interrupted write loses at most the last mutation.
"""

import logging
import random
from dataclasses import dataclass, replace
from datetime import datetime, tzinfo

from lexivault.domain.constants import DISTRACTOR_COUNT, MISSION_MIN_SIZE, MISSION_RATIO
from lexivault.domain.days import day_key
from lexivault.domain.errors import CollectionNotFoundError, ItemNotFoundError
from lexivault.domain.models import (
    AnswerOutcome,
    Collection,
    EngagementCounts,
    Item,
    LearnerSnapshot,
    UserStats,
)
from lexivault.domain.ports import Clock, CollectionStore, HistoryStore, ItemStore, StatsStore

from .engagement import evaluate_achievements, record_history, record_review, unlock
from .engagement.achievements import QUICK_LEARNER
from .library import add_to_collection, new_collection, new_item
from .mission import complete_mission, ensure_mission, mission_available
from .queue_builder import resolve_mission, select_due
from .scheduling import DEFAULT_INTERVALS, IntervalTable, apply_answer, count_mastered
from .sessions import RecoverySession, ReviewResult, ReviewSession, SessionMode

logger = logging.getLogger(__name__)


@dataclass
class StudyPolicy:
    """Tunable knobs, normally taken from AppConfig."""

    intervals: IntervalTable = DEFAULT_INTERVALS
    mission_min_size: int = MISSION_MIN_SIZE
    mission_ratio: float = MISSION_RATIO
    distractor_count: int = DISTRACTOR_COUNT
    streak_resets_on_gap: bool = False


@dataclass(frozen=True)
class AddItemResult:
    item: Item | None

    @property
    def ok(self) -> bool:
        return self.item is not None


class StudyService:
    """
    Application service for reviewing items.

    Follows Dependency Inversion: depends on store and clock abstractions,
    not concrete adapter implementations.
    """

    def __init__(
        self,
        items: ItemStore,
        stats: StatsStore,
        history: HistoryStore,
        collections: CollectionStore,
        clock: Clock,
        tz: tzinfo | None = None,
        policy: StudyPolicy | None = None,
        rng: random.Random | None = None,
    ):
        self._items_store = items
        self._stats_store = stats
        self._history_store = history
        self._collections_store = collections
        self.clock = clock
        self.tz = tz
        self.policy = policy or StudyPolicy()
        self.rng = rng or random.Random()
        self.state = LearnerSnapshot()
        self._loaded = False

    # ------------------------------------------------------------------
    # Loading & persistence
    # ------------------------------------------------------------------

    async def load(self) -> LearnerSnapshot:
        """Read every store into memory. Missing stats start a fresh aggregate."""
        stats = await self._stats_store.get()
        if stats is None:
            stats = UserStats(joined_at=self.clock.now())

        self.state = LearnerSnapshot(
            items=await self._items_store.get_all(),
            stats=stats,
            history=await self._history_store.get(),
            collections=await self._collections_store.get_all(),
        )
        self._loaded = True
        logger.debug(f"Loaded {len(self.state.items)} item(s)")
        return self.state

    async def ensure_loaded(self) -> LearnerSnapshot:
        """Load once; afterwards the in-memory snapshot is authoritative."""
        if not self._loaded:
            await self.load()
        return self.state

    async def _persist(self, items: bool = False, history: bool = False,
                       collections: bool = False) -> None:
        if items:
            await self._items_store.replace_all(self.state.items)
        if history:
            await self._history_store.replace(self.state.history)
        if collections:
            await self._collections_store.replace_all(self.state.collections)
        await self._stats_store.replace(self.state.stats)

    # ------------------------------------------------------------------
    # Time helpers
    # ------------------------------------------------------------------

    def now(self) -> datetime:
        return self.clock.now()

    def today(self) -> str:
        return day_key(self.clock.now(), self.tz)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def due_items(self) -> list[Item]:
        await self.ensure_loaded()
        return select_due(self.state.items, self.now())

    def counts(self) -> EngagementCounts:
        return self.counts_for(self.state.stats)

    def counts_for(self, stats: UserStats) -> EngagementCounts:
        return EngagementCounts(
            item_count=len(self.state.items),
            mastered_count=stats.mastered_count,
            streak=stats.streak,
            collection_count=len(self.state.collections),
        )

    def get_item(self, item_id: str) -> Item:
        for item in self.state.items:
            if item.id == item_id:
                return item
        raise ItemNotFoundError(item_id)

    # ------------------------------------------------------------------
    # Library
    # ------------------------------------------------------------------

    async def add_item(self, term: str, definition: str, **fields) -> AddItemResult:
        """Add a NEW item. Duplicate terms yield a failed result, not an exception."""
        await self.ensure_loaded()
        item = new_item(self.state.items, term, definition, self.now(), **fields)
        if item is None:
            return AddItemResult(item=None)

        stats = self.state.stats
        stats = replace(
            stats,
            total_items=stats.total_items + 1,
            first_item_id=stats.first_item_id or item.id,
        )
        self.state.items = [*self.state.items, item]
        self.state.stats = evaluate_achievements(stats, self.counts_for(stats))

        logger.info(f'Added "{item.term}" ({item.id})')
        await self._persist(items=True)
        return AddItemResult(item=item)

    async def create_collection(self, name: str, icon: str = "📚") -> Collection:
        await self.ensure_loaded()
        collection = new_collection(name, icon, self.now())
        self.state.collections = [*self.state.collections, collection]
        self.state.stats = evaluate_achievements(self.state.stats, self.counts())
        await self._persist(collections=True)
        return collection

    async def add_to_collection(self, collection_id: str, item_ids: list[str]) -> Collection:
        await self.ensure_loaded()
        for index, collection in enumerate(self.state.collections):
            if collection.id == collection_id:
                updated = add_to_collection(collection, item_ids)
                collections = list(self.state.collections)
                collections[index] = updated
                self.state.collections = collections
                await self._persist(collections=True)
                return updated
        raise CollectionNotFoundError(collection_id)

    # ------------------------------------------------------------------
    # Missions
    # ------------------------------------------------------------------

    async def refresh_mission(self) -> UserStats:
        """Daily boundary check: create today's mission if needed."""
        await self.ensure_loaded()
        stats = ensure_mission(
            self.state.stats,
            select_due(self.state.items, self.now()),
            self.today(),
            rng=self.rng,
            min_size=self.policy.mission_min_size,
            ratio=self.policy.mission_ratio,
        )
        if stats is not self.state.stats:
            self.state.stats = stats
            await self._persist()
        return stats

    def mission_available(self) -> bool:
        return mission_available(self.state.stats)

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def start_review(self) -> ReviewSession:
        session = ReviewSession(SessionMode.REVIEW, await self.due_items())
        session.start()
        return session

    async def start_mission(self) -> ReviewSession:
        await self.ensure_loaded()
        queue = resolve_mission(self.state.stats.daily_mission, self.state.items)
        session = ReviewSession(SessionMode.MISSION, queue)
        session.start()
        return session

    async def start_recovery(self) -> RecoverySession:
        await self.ensure_loaded()
        queue = resolve_mission(self.state.stats.daily_mission, self.state.items)
        session = RecoverySession(
            queue,
            self.state.items,
            rng=self.rng,
            distractor_count=self.policy.distractor_count,
        )
        session.start()
        return session

    async def answer(self, session: ReviewSession, knew_it: bool) -> ReviewResult:
        """Answer the current item of a flip-card session."""
        result = session.answer(knew_it)
        await self._after_answer(session, result)
        return result

    async def choose(self, session: RecoverySession, choice: str) -> ReviewResult:
        """Answer the current recovery question with the chosen term."""
        result = session.choose(choice)
        await self._after_answer(session, result)
        return result

    async def cancel(self, session: ReviewSession) -> None:
        """
        Stop a session early. Answers already committed by REVIEW and MISSION
        sessions stay applied; a RECOVERY session commits nothing.
        """
        session.cancel()
        if session.mode is SessionMode.RECOVERY:
            logger.info(f"Recovery cancelled; discarded {len(session.results)} answer(s)")

    async def _after_answer(self, session: ReviewSession, result: ReviewResult) -> None:
        if session.commits_immediately:
            await self.commit_answers([result])

        if not session.is_finished or session.cancelled:
            return

        if session.mode is SessionMode.RECOVERY:
            await self.commit_answers(session.results)

        if session.mode in (SessionMode.MISSION, SessionMode.RECOVERY):
            self.state.stats = complete_mission(self.state.stats)
            logger.info(f"Mission completed: {session.correct_count}/{len(session.results)} correct")
            await self._persist()

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------

    async def record_answer(self, item_id: str, knew_it: bool) -> AnswerOutcome:
        """Apply a single answer outside of a session (e.g. from the HTTP API)."""
        await self.ensure_loaded()
        self.get_item(item_id)
        outcomes = await self.commit_answers([ReviewResult(item_id=item_id, knew_it=knew_it)])
        return outcomes[0]

    async def commit_answers(self, results: list[ReviewResult]) -> list[AnswerOutcome]:
        """
        Apply answers through the scheduling policy and update engagement state.

        Items deleted since the session started are skipped.
        """
        now = self.now()
        today = day_key(now, self.tz)
        items = list(self.state.items)
        index = {item.id: i for i, item in enumerate(items)}
        stats = self.state.stats
        history = self.state.history
        outcomes: list[AnswerOutcome] = []

        for result in results:
            position = index.get(result.item_id)
            if position is None:
                logger.debug(f"Skipping answer for missing item {result.item_id}")
                continue

            outcome = apply_answer(items[position], result.knew_it, now, self.policy.intervals)
            items[position] = outcome.item
            outcomes.append(outcome)

            stats = record_review(stats, today, reset_on_gap=self.policy.streak_resets_on_gap)
            history = record_history(history, today)
            if outcome.fast_mastery:
                stats = unlock(stats, QUICK_LEARNER)

        if not outcomes:
            return outcomes

        self.state.items = items
        self.state.history = history
        stats = replace(stats, mastered_count=count_mastered(items))
        self.state.stats = evaluate_achievements(stats, self.counts_for(stats))

        await self._persist(items=True, history=True)
        return outcomes
