"""
Study Service Factory
Centralizes the logic for selecting the appropriate store adapters.
"""

import logging
import random

from lexivault.application.config import AppConfig
from lexivault.application.study_service import StudyPolicy, StudyService
from lexivault.domain.ports import Clock
from lexivault.infrastructure.clock import SystemClock
from lexivault.infrastructure.stores import (
    InMemoryCollectionStore,
    InMemoryHistoryStore,
    InMemoryItemStore,
    InMemoryStatsStore,
    JsonCollectionStore,
    JsonHistoryStore,
    JsonItemStore,
    JsonStatsStore,
)

logger = logging.getLogger(__name__)


def get_study_service(config: AppConfig, clock: Clock | None = None) -> StudyService:
    """
    Returns a StudyService wired to the stores selected by ``config.backend``.
    """
    policy = StudyPolicy(
        mission_min_size=config.mission_min_size,
        mission_ratio=config.mission_ratio,
        distractor_count=config.distractor_count,
        streak_resets_on_gap=config.streak_resets_on_gap,
    )
    rng = random.Random(config.seed)

    if config.backend == "memory":
        logger.debug("Backend: in-memory")
        return StudyService(
            items=InMemoryItemStore(),
            stats=InMemoryStatsStore(),
            history=InMemoryHistoryStore(),
            collections=InMemoryCollectionStore(),
            clock=clock or SystemClock(),
            tz=config.tz,
            policy=policy,
            rng=rng,
        )

    logger.debug(f"Backend: json ({config.data_dir})")
    return StudyService(
        items=JsonItemStore(config.data_dir),
        stats=JsonStatsStore(config.data_dir),
        history=JsonHistoryStore(config.data_dir),
        collections=JsonCollectionStore(config.data_dir),
        clock=clock or SystemClock(),
        tz=config.tz,
        policy=policy,
        rng=rng,
    )
