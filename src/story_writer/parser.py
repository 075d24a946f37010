"""Turn raw generated text into a story ``Item``."""

from __future__ import annotations

import uuid
from collections.abc import Callable, Collection
from datetime import datetime

from src.common.models import AI_ID_PREFIX, Item

from .errors import IdGenerationError

PLACEHOLDER_TITLE = "Generated story"
GENERATED_TAGS = ("AI", "generated")
EXCERPT_LENGTH = 100
ID_SUFFIX_LENGTH = 8
MAX_ID_ATTEMPTS = 5


def make_excerpt(text: str, limit: int = EXCERPT_LENGTH) -> str:
    """First ``limit`` characters of ``text``, plus "..." when truncated."""
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def format_short_date(moment: datetime) -> str:
    """Locale-dependent short date, e.g. ``10/18/26`` in the C locale."""
    return moment.strftime("%x")


def new_item_id(
    id_factory: Callable[[], uuid.UUID] = uuid.uuid4,
    taken_ids: Collection[str] = (),
) -> str:
    """Build an ``ai_XXXXXXXX`` identifier not present in ``taken_ids``.

    Raises:
        IdGenerationError: If every attempt collided with an existing id.
    """
    for _ in range(MAX_ID_ATTEMPTS):
        suffix = str(id_factory()).upper()[:ID_SUFFIX_LENGTH]
        candidate = f"{AI_ID_PREFIX}{suffix}"
        if candidate not in taken_ids:
            return candidate
    raise IdGenerationError(
        f"Could not create a unique story id after {MAX_ID_ATTEMPTS} attempts. Try again."
    )


def parse_story(
    raw_text: str,
    generated_at: datetime | None = None,
    id_factory: Callable[[], uuid.UUID] = uuid.uuid4,
    taken_ids: Collection[str] = (),
) -> Item:
    """Split generated text into title and body and wrap it in an ``Item``.

    The first non-empty line becomes the title; the remaining non-empty
    lines, joined with single newlines, become the body.

    Args:
        raw_text: Cleaned model output.
        generated_at: Creation time used for the display date (default now).
        id_factory: UUID source for the item id.
        taken_ids: Ids already in use; a colliding id is regenerated.

    Returns:
        New generated ``Item`` with AI tags and no image.
    """
    generated_at = generated_at or datetime.now()
    lines = [line for line in raw_text.splitlines() if line.strip()]

    title = lines[0].strip() if lines else PLACEHOLDER_TITLE
    body = "\n".join(lines[1:]).strip()

    return Item(
        id=new_item_id(id_factory, taken_ids),
        title=title,
        date=format_short_date(generated_at),
        excerpt=make_excerpt(body),
        body=body,
        tags=list(GENERATED_TAGS),
        image_ref=None,
    )
