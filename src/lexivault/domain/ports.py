"""
Ports (interfaces) for persistence and time.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
All stores use bulk read/replace semantics; there is no partial update API.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from .models import Collection, Item, StudyHistoryEntry, UserStats


class ItemStore(ABC):
    """
    Port for the learner's item collection.

    Implementations:
        - InMemoryItemStore: Process-local list, used by tests and the server default.
        - JsonItemStore: One JSON document under the data directory.
    """

    @abstractmethod
    async def get_all(self) -> list[Item]:
        pass

    @abstractmethod
    async def replace_all(self, items: list[Item]) -> None:
        """Replace the whole collection. Last write wins."""
        pass


class StatsStore(ABC):
    @abstractmethod
    async def get(self) -> UserStats | None:
        """Return the stored aggregate, or None if nothing has been saved yet."""
        pass

    @abstractmethod
    async def replace(self, stats: UserStats) -> None:
        pass


class HistoryStore(ABC):
    @abstractmethod
    async def get(self) -> list[StudyHistoryEntry]:
        pass

    @abstractmethod
    async def replace(self, history: list[StudyHistoryEntry]) -> None:
        pass


class CollectionStore(ABC):
    @abstractmethod
    async def get_all(self) -> list[Collection]:
        pass

    @abstractmethod
    async def replace_all(self, collections: list[Collection]) -> None:
        pass


class Clock(ABC):
    """Injectable time source. Pure policy functions never call this themselves."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current instant as a timezone-aware datetime."""
        pass
