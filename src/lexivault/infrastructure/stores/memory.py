"""
In-memory store adapters.

Copies on read and write so callers never share list instances with the store.
"""

from lexivault.domain.models import Collection, Item, StudyHistoryEntry, UserStats
from lexivault.domain.ports import CollectionStore, HistoryStore, ItemStore, StatsStore


class InMemoryItemStore(ItemStore):
    def __init__(self, items: list[Item] | None = None):
        self._items = list(items or [])

    async def get_all(self) -> list[Item]:
        return list(self._items)

    async def replace_all(self, items: list[Item]) -> None:
        self._items = list(items)


class InMemoryStatsStore(StatsStore):
    def __init__(self, stats: UserStats | None = None):
        self._stats = stats

    async def get(self) -> UserStats | None:
        return self._stats

    async def replace(self, stats: UserStats) -> None:
        self._stats = stats


class InMemoryHistoryStore(HistoryStore):
    def __init__(self, history: list[StudyHistoryEntry] | None = None):
        self._history = list(history or [])

    async def get(self) -> list[StudyHistoryEntry]:
        return list(self._history)

    async def replace(self, history: list[StudyHistoryEntry]) -> None:
        self._history = list(history)


class InMemoryCollectionStore(CollectionStore):
    def __init__(self, collections: list[Collection] | None = None):
        self._collections = list(collections or [])

    async def get_all(self) -> list[Collection]:
        return list(self._collections)

    async def replace_all(self, collections: list[Collection]) -> None:
        self._collections = list(collections)
