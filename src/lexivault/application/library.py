"""Item and collection creation helpers with stable ULID-based IDs."""

import logging
from dataclasses import replace
from datetime import datetime

from ulid import ULID

from lexivault.domain.models import Collection, Item, ItemStatus

logger = logging.getLogger(__name__)


def generate_item_id() -> str:
    return f"item_{ULID()}"


def generate_collection_id() -> str:
    return f"col_{ULID()}"


def normalize_term(term: str) -> str:
    return term.strip().lower()


def term_exists(items: list[Item], term: str) -> bool:
    """Case-insensitive, whitespace-trimmed duplicate check."""
    key = normalize_term(term)
    return any(normalize_term(item.term) == key for item in items)


def new_item(
    items: list[Item],
    term: str,
    definition: str,
    now: datetime,
    example: str = "",
    ipa: str | None = None,
    tags: tuple[str, ...] = (),
    image_url: str | None = None,
) -> Item | None:
    """
    Create a NEW item that is due immediately.

    Returns:
        The new item, or None if the term duplicates an existing one. The
        caller decides how to report the rejection.
    """
    if term_exists(items, term):
        logger.warning(f'Term "{term}" already exists.')
        return None

    return Item(
        id=generate_item_id(),
        term=term.strip(),
        definition=definition.strip(),
        status=ItemStatus.NEW,
        next_due_at=now,
        created_at=now,
        example=example,
        ipa=ipa,
        tags=tuple(tags),
        image_url=image_url,
    )


def new_collection(name: str, icon: str, now: datetime) -> Collection:
    return Collection(id=generate_collection_id(), name=name, icon=icon, created_at=now)


def add_to_collection(collection: Collection, item_ids: list[str]) -> Collection:
    """Append item IDs, keeping existing order and dropping duplicates."""
    merged = list(dict.fromkeys([*collection.item_ids, *item_ids]))
    return replace(collection, item_ids=tuple(merged))
