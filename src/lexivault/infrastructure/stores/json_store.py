"""
JSON Store Adapters — file-backed persistence under a data directory.

Each store owns one JSON document and replaces it wholesale on every write
(last write wins). Failures are logged here and never raised into the
scheduling core: a failed read yields the empty default and moves the
unreadable file to ``<name>.corrupt``, a failed write leaves the previous
file in place.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter, ValidationError

from lexivault.domain.constants import (
    COLLECTIONS_FILE,
    HISTORY_FILE,
    ITEMS_FILE,
    STATS_FILE,
)
from lexivault.domain.models import Collection, Item, StudyHistoryEntry, UserStats
from lexivault.domain.ports import CollectionStore, HistoryStore, ItemStore, StatsStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class JsonDocument(Generic[T]):
    """A single typed JSON file with atomic replace."""

    def __init__(self, path: Path, adapter: TypeAdapter[T], default: Any):
        self.path = path
        self._adapter = adapter
        self._default = default
        self._read_only = False

    def _empty(self) -> T:
        return self._default() if callable(self._default) else self._default

    def read(self) -> T:
        if not self.path.exists():
            return self._empty()

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return self._adapter.validate_python(raw)
        except (OSError, ValueError, ValidationError) as e:
            logger.error(f"Failed to read {self.path}: {e}")
            self._set_aside()
            return self._empty()

    def _set_aside(self) -> None:
        """Move an unreadable file out of the way so the next write cannot clobber it."""
        backup = self.path.with_suffix(self.path.suffix + ".corrupt")
        try:
            os.replace(self.path, backup)
            logger.warning(f"Moved unreadable {self.path.name} to {backup}")
        except OSError as e:
            logger.error(f"Failed to move {self.path} aside, writes disabled: {e}")
            self._read_only = True

    def write(self, value: T) -> None:
        if self._read_only:
            logger.error(f"Skipping write to {self.path}: file could not be read")
            return

        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            payload = self._adapter.dump_python(value, mode="json")
            tmp.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            logger.error(f"Failed to write {self.path}: {e}")


class JsonItemStore(ItemStore):
    def __init__(self, data_dir: Path):
        self._doc = JsonDocument(data_dir / ITEMS_FILE, TypeAdapter(list[Item]), list)

    async def get_all(self) -> list[Item]:
        return self._doc.read()

    async def replace_all(self, items: list[Item]) -> None:
        self._doc.write(items)


class JsonStatsStore(StatsStore):
    def __init__(self, data_dir: Path):
        self._doc = JsonDocument(data_dir / STATS_FILE, TypeAdapter(UserStats | None), None)

    async def get(self) -> UserStats | None:
        return self._doc.read()

    async def replace(self, stats: UserStats) -> None:
        self._doc.write(stats)


class JsonHistoryStore(HistoryStore):
    def __init__(self, data_dir: Path):
        self._doc = JsonDocument(
            data_dir / HISTORY_FILE, TypeAdapter(list[StudyHistoryEntry]), list
        )

    async def get(self) -> list[StudyHistoryEntry]:
        return self._doc.read()

    async def replace(self, history: list[StudyHistoryEntry]) -> None:
        self._doc.write(history)


class JsonCollectionStore(CollectionStore):
    def __init__(self, data_dir: Path):
        self._doc = JsonDocument(
            data_dir / COLLECTIONS_FILE, TypeAdapter(list[Collection]), list
        )

    async def get_all(self) -> list[Collection]:
        return self._doc.read()

    async def replace_all(self, collections: list[Collection]) -> None:
        self._doc.write(collections)
