import os
import random
from datetime import datetime, timezone

import pytest

from lexivault.application.study_service import StudyService
from lexivault.domain.models import Item, ItemStatus
from lexivault.infrastructure.clock import FixedClock
from lexivault.infrastructure.stores import (
    InMemoryCollectionStore,
    InMemoryHistoryStore,
    InMemoryItemStore,
    InMemoryStatsStore,
)

T0 = datetime(2024, 3, 10, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def t0():
    return T0


@pytest.fixture
def make_item():
    """Factory for items with sensible defaults; override any field by keyword."""
    counter = iter(range(1, 10_000))

    def _make(**overrides) -> Item:
        n = next(counter)
        fields = {
            "id": f"item-{n}",
            "term": f"term{n}",
            "definition": f"definition {n}",
            "status": ItemStatus.NEW,
            "next_due_at": T0,
            "created_at": T0,
        }
        fields.update(overrides)
        return Item(**fields)

    return _make


@pytest.fixture
def clock():
    return FixedClock(T0)


@pytest.fixture
def stores():
    """Fresh in-memory stores, returned so tests can inspect what was persisted."""
    return {
        "items": InMemoryItemStore(),
        "stats": InMemoryStatsStore(),
        "history": InMemoryHistoryStore(),
        "collections": InMemoryCollectionStore(),
    }


@pytest.fixture
def service(stores, clock):
    """StudyService over in-memory stores, UTC day boundaries and a seeded RNG."""
    return StudyService(
        items=stores["items"],
        stats=stores["stats"],
        history=stores["history"],
        collections=stores["collections"],
        clock=clock,
        tz=timezone.utc,
        rng=random.Random(1234),
    )


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir and clears LEXIVAULT_* env vars."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config files
    monkeypatch.setenv("HOME", str(home))
    for key in list(os.environ):
        if key.startswith("LEXIVAULT_"):
            monkeypatch.delenv(key)
    return home
