"""Tests for the in-memory stores."""

import pytest

from lexivault.infrastructure.stores import InMemoryItemStore, InMemoryStatsStore


@pytest.mark.asyncio
async def test_item_store_copies(make_item):
    items = [make_item()]
    store = InMemoryItemStore(items)
    items.append(make_item())

    loaded = await store.get_all()
    assert len(loaded) == 1
    loaded.append(make_item())
    assert len(await store.get_all()) == 1


@pytest.mark.asyncio
async def test_stats_store_starts_empty():
    assert await InMemoryStatsStore().get() is None
