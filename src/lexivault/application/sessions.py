"""
Review session state machines.

Three modes share one primitive (an answer per item) but differ in where the
queue comes from and when answers are committed:

- REVIEW: due queue captured at start, each answer committed immediately.
- MISSION: today's mission items, each answer committed immediately; natural
  completion marks the mission completed.
- RECOVERY: multiple-choice quiz over mission items; answers are collected
  and committed as one batch when the session completes.

Sessions themselves never touch stores or clocks. ``StudyService`` drives them
and performs commits.
"""

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from lexivault.domain.constants import DISTRACTOR_COUNT
from lexivault.domain.errors import SessionStateError
from lexivault.domain.models import Item

logger = logging.getLogger(__name__)


class SessionMode(str, Enum):
    REVIEW = "review"
    MISSION = "mission"
    RECOVERY = "recovery"


class SessionState(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ReviewResult:
    item_id: str
    knew_it: bool


@dataclass(frozen=True)
class QuizQuestion:
    """One recovery question: pick the term matching ``definition``."""

    item_id: str
    definition: str
    options: tuple[str, ...]
    correct_answer: str

    def is_correct(self, choice: str) -> bool:
        return choice == self.correct_answer


def build_question(
    item: Item,
    corpus: Sequence[Item],
    rng: random.Random,
    distractor_count: int = DISTRACTOR_COUNT,
) -> QuizQuestion:
    """
    Build a question with the correct term plus up to ``distractor_count``
    distractor terms drawn from the rest of the corpus.

    A small corpus yields fewer options rather than an error.
    """
    pool = [other.term for other in corpus if other.id != item.id]
    distractors = rng.sample(pool, min(distractor_count, len(pool)))

    options = [*distractors, item.term]
    rng.shuffle(options)

    return QuizQuestion(
        item_id=item.id,
        definition=item.definition,
        options=tuple(options),
        correct_answer=item.term,
    )


class ReviewSession:
    """
    A sequence of review exposures.

    State machine: NOT_STARTED -> IN_PROGRESS(index) -> COMPLETE | CANCELLED.
    """

    def __init__(self, mode: SessionMode, queue: Sequence[Item]):
        self.mode = mode
        # Captured once; not re-evaluated if more items become due mid-session.
        self.queue: tuple[Item, ...] = tuple(queue)
        self.state = SessionState.NOT_STARTED
        self.index = 0
        self.results: list[ReviewResult] = []

    @property
    def commits_immediately(self) -> bool:
        return self.mode is not SessionMode.RECOVERY

    @property
    def is_finished(self) -> bool:
        return self.state in (SessionState.COMPLETE, SessionState.CANCELLED)

    @property
    def cancelled(self) -> bool:
        """True when the learner exited early; distinguishes it from natural completion."""
        return self.state is SessionState.CANCELLED

    @property
    def remaining(self) -> int:
        return len(self.queue) - self.index

    @property
    def current(self) -> Item | None:
        if self.state is not SessionState.IN_PROGRESS:
            return None
        return self.queue[self.index]

    @property
    def correct_count(self) -> int:
        return sum(1 for r in self.results if r.knew_it)

    def start(self) -> None:
        if self.state is not SessionState.NOT_STARTED:
            raise SessionStateError(f"Session already {self.state.value}")

        # An empty queue completes immediately.
        self.state = SessionState.IN_PROGRESS if self.queue else SessionState.COMPLETE
        logger.debug(f"Started {self.mode.value} session with {len(self.queue)} item(s)")

    def answer(self, knew_it: bool) -> ReviewResult:
        """Record an answer for the current item and advance."""
        item = self.current
        if item is None:
            raise SessionStateError(f"Cannot answer a session that is {self.state.value}")

        result = ReviewResult(item_id=item.id, knew_it=knew_it)
        self.results.append(result)
        self.index += 1

        if self.index >= len(self.queue):
            self.state = SessionState.COMPLETE

        return result

    def cancel(self) -> None:
        if self.is_finished:
            raise SessionStateError(f"Session already {self.state.value}")
        self.state = SessionState.CANCELLED
        logger.debug(f"Cancelled {self.mode.value} session after {len(self.results)} answer(s)")


class RecoverySession(ReviewSession):
    """Multiple-choice recall check over mission items, committed as a batch."""

    def __init__(
        self,
        queue: Sequence[Item],
        corpus: Sequence[Item],
        rng: random.Random | None = None,
        distractor_count: int = DISTRACTOR_COUNT,
    ):
        rng = rng or random.Random()
        questions = [build_question(item, corpus, rng, distractor_count) for item in queue]
        rng.shuffle(questions)

        by_id = {item.id: item for item in queue}
        super().__init__(SessionMode.RECOVERY, [by_id[q.item_id] for q in questions])
        self.questions: tuple[QuizQuestion, ...] = tuple(questions)

    @property
    def current_question(self) -> QuizQuestion | None:
        if self.state is not SessionState.IN_PROGRESS:
            return None
        return self.questions[self.index]

    def choose(self, choice: str) -> ReviewResult:
        """Answer the current question by exact term match."""
        question = self.current_question
        if question is None:
            raise SessionStateError(f"Cannot answer a session that is {self.state.value}")
        return self.answer(question.is_correct(choice))
