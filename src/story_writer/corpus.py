"""Bundled story corpus loading."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from src.common.config import settings
from src.common.logging import setup_logging
from src.common.models import Item

logger = setup_logging(module_name="story_writer.corpus")


def load_corpus(
    path: Path | str | None = None,
    include_generated: bool = False,
) -> list[Item]:
    """Load the bundled stories JSON array.

    A missing or malformed file degrades to an empty corpus; individual
    records that fail validation are skipped.

    Args:
        path: Corpus file (default: ``settings.storage.corpus_path``).
        include_generated: Keep items whose id carries the AI prefix.
            Off by default so style examples stay human-authored.

    Returns:
        Corpus items in file order.
    """
    path = Path(path or settings.storage.corpus_path)
    if not path.exists():
        logger.warning("Corpus file not found: %s", path)
        return []

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as exc:
        logger.warning("Could not load corpus from %s: %s", path, exc)
        return []

    if not isinstance(data, list):
        logger.warning("Corpus %s is not a JSON array", path)
        return []

    items: list[Item] = []
    for entry in data:
        try:
            item = Item.from_dict(entry)
        except ValidationError:
            logger.warning("Skipping invalid corpus record: %r", entry)
            continue
        if item.is_generated and not include_generated:
            continue
        items.append(item)

    logger.info("Loaded %d stories from %s", len(items), path)
    return items
