"""Tests for the JSON file stores."""

import json
import logging
from datetime import timedelta

import pytest

from lexivault.domain.models import (
    Collection,
    DailyMission,
    ItemStatus,
    StudyHistoryEntry,
    UserStats,
)
from lexivault.infrastructure.stores import (
    JsonCollectionStore,
    JsonHistoryStore,
    JsonItemStore,
    JsonStatsStore,
)


@pytest.mark.asyncio
async def test_missing_files_return_defaults(tmp_path):
    assert await JsonItemStore(tmp_path).get_all() == []
    assert await JsonStatsStore(tmp_path).get() is None
    assert await JsonHistoryStore(tmp_path).get() == []
    assert await JsonCollectionStore(tmp_path).get_all() == []


@pytest.mark.asyncio
async def test_items_survive_a_restart(tmp_path, make_item, t0):
    item = make_item(
        status=ItemStatus.LEARNING,
        next_due_at=t0 + timedelta(days=3),
        tags=("Academic", "GRE"),
        ipa="ɪˈfɛmərəl",
    )
    await JsonItemStore(tmp_path / "data").replace_all([item])

    loaded = await JsonItemStore(tmp_path / "data").get_all()
    assert loaded == [item]
    assert loaded[0].next_due_at.tzinfo is not None


@pytest.mark.asyncio
async def test_stats_with_mission(tmp_path, t0):
    stats = UserStats(
        streak=4,
        longest_streak=9,
        last_study_date="2024-03-10",
        unlocked_achievements=("first_memory", "bronze_mind"),
        daily_mission=DailyMission(date="2024-03-10", item_ids=("a", "b", "c")),
        joined_at=t0,
    )
    store = JsonStatsStore(tmp_path)
    await store.replace(stats)
    assert await store.get() == stats


@pytest.mark.asyncio
async def test_history_and_collections(tmp_path, t0):
    history = [StudyHistoryEntry("2024-03-09", 2), StudyHistoryEntry("2024-03-10", 1)]
    collections = [Collection(id="c1", name="Work", icon="💼", created_at=t0, item_ids=("a",))]

    await JsonHistoryStore(tmp_path).replace(history)
    await JsonCollectionStore(tmp_path).replace_all(collections)

    assert await JsonHistoryStore(tmp_path).get() == history
    assert await JsonCollectionStore(tmp_path).get_all() == collections


@pytest.mark.asyncio
async def test_replace_is_whole_collection(tmp_path, make_item):
    store = JsonItemStore(tmp_path)
    await store.replace_all([make_item(), make_item()])
    only = make_item()
    await store.replace_all([only])
    assert await store.get_all() == [only]


@pytest.mark.asyncio
async def test_corrupt_file_is_logged_not_raised(tmp_path, caplog):
    (tmp_path / "items.json").write_text("{not json", encoding="utf-8")

    with caplog.at_level(logging.ERROR):
        assert await JsonItemStore(tmp_path).get_all() == []

    assert "Failed to read" in caplog.text


@pytest.mark.asyncio
async def test_write_failure_is_logged_not_raised(tmp_path, caplog, make_item):
    # A regular file where the data directory should be makes mkdir fail
    blocker = tmp_path / "blocked"
    blocker.write_text("", encoding="utf-8")

    with caplog.at_level(logging.ERROR):
        await JsonItemStore(blocker / "data").replace_all([make_item()])

    assert "Failed to write" in caplog.text


@pytest.mark.asyncio
async def test_bad_record_is_set_aside_not_overwritten(tmp_path, make_item, caplog):
    store = JsonItemStore(tmp_path)
    await store.replace_all([make_item(term="alpha"), make_item(term="beta")])

    path = tmp_path / "items.json"
    raw = json.loads(path.read_text(encoding="utf-8"))
    raw[1]["next_due_at"] = "not-a-date"
    original = json.dumps(raw)
    path.write_text(original, encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        assert await store.get_all() == []

    backup = tmp_path / "items.json.corrupt"
    assert backup.read_text(encoding="utf-8") == original
    assert "Moved unreadable items.json" in caplog.text

    gamma = make_item(term="gamma")
    await store.replace_all([gamma])
    assert await store.get_all() == [gamma]
    assert backup.read_text(encoding="utf-8") == original
