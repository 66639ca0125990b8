# Domain Package
from .models import (
    Collection,
    DailyMission,
    Item,
    ItemStatus,
    StudyHistoryEntry,
    UserStats,
)

__all__ = [
    "Collection",
    "DailyMission",
    "Item",
    "ItemStatus",
    "StudyHistoryEntry",
    "UserStats",
]
