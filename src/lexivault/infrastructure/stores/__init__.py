# Store Adapters Package
from .json_store import JsonCollectionStore, JsonHistoryStore, JsonItemStore, JsonStatsStore
from .memory import (
    InMemoryCollectionStore,
    InMemoryHistoryStore,
    InMemoryItemStore,
    InMemoryStatsStore,
)

__all__ = [
    "InMemoryCollectionStore",
    "InMemoryHistoryStore",
    "InMemoryItemStore",
    "InMemoryStatsStore",
    "JsonCollectionStore",
    "JsonHistoryStore",
    "JsonItemStore",
    "JsonStatsStore",
]
