"""Generated story persistence.

Generated items are kept as one JSON array under a fixed setting name and
rewritten wholesale on every change. The persisted collection is the
durable source of truth; ``items`` is the in-memory view for the current
session and is updated even when a write fails.
"""

from __future__ import annotations

import json
import sqlite3

from pydantic import ValidationError

from src.common.database import KeyValueStore
from src.common.logging import setup_logging
from src.common.models import Item

logger = setup_logging(module_name="story_writer.store")

GENERATED_STORIES_SETTING = "generated_stories"


class GeneratedItemStore:
    """Merge generated stories into the local store, deduplicated by id.

    Usage:
        store = GeneratedItemStore(KeyValueStore())
        store.merge(item)
        store.load_all()
    """

    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv
        self._items: list[Item] = self.load_all()

    @property
    def items(self) -> list[Item]:
        """In-memory generated items for the current session."""
        return list(self._items)

    def load_all(self) -> list[Item]:
        """Read the persisted collection. Missing or undecodable data is empty."""
        try:
            raw = self._kv.get(GENERATED_STORIES_SETTING)
        except sqlite3.Error:
            logger.warning("Could not read generated stories", exc_info=True)
            return []
        if not raw:
            return []

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array, got {type(data).__name__}")
            return [Item.from_dict(entry) for entry in data]
        except (ValueError, ValidationError) as exc:
            logger.warning("Could not decode generated stories: %s", exc)
            return []

    def merge(self, item: Item) -> bool:
        """Add ``item`` to the persisted and in-memory collections.

        Each collection gains the item only if it has no entry with the
        same id. Persistence failures are logged, not raised.

        Returns:
            True if the item was new to the in-memory collection.
        """
        persisted = self.load_all()
        if not any(existing.id == item.id for existing in persisted):
            persisted.append(item)
            self._persist(persisted)

        if any(existing.id == item.id for existing in self._items):
            return False
        self._items.append(item)
        logger.info("Merged generated story %s: %s", item.id, item.title)
        return True

    def remove(self, item_id: str) -> bool:
        """Delete a generated story. Returns True if it was present."""
        before = len(self._items)
        self._items = [i for i in self._items if i.id != item_id]

        persisted = self.load_all()
        remaining = [i for i in persisted if i.id != item_id]
        if len(remaining) < len(persisted):
            self._persist(remaining)

        return len(self._items) < before

    def _persist(self, items: list[Item]) -> bool:
        try:
            payload = json.dumps([i.to_dict() for i in items], ensure_ascii=False)
            self._kv.set(GENERATED_STORIES_SETTING, payload)
        except (sqlite3.Error, TypeError, ValueError):
            logger.warning(
                "Could not persist %d generated stories; keeping them in memory only",
                len(items), exc_info=True,
            )
            return False
        return True
