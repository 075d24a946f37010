"""Story listing and search over the corpus plus generated stories."""

from __future__ import annotations

from src.common.models import Item

from .store import GeneratedItemStore


class StoryGallery:
    """Display list: bundled corpus followed by generated stories.

    The generated part is read live from the store, so items merged during
    the session show up without reloading.
    """

    def __init__(self, corpus: list[Item], store: GeneratedItemStore) -> None:
        self._corpus = list(corpus)
        self._store = store

    @property
    def items(self) -> list[Item]:
        seen: set[str] = set()
        merged: list[Item] = []
        for item in [*self._corpus, *self._store.items]:
            if item.id in seen:
                continue
            seen.add(item.id)
            merged.append(item)
        return merged

    def get(self, item_id: str) -> Item | None:
        return next((i for i in self.items if i.id == item_id), None)

    def search(self, term: str = "") -> list[Item]:
        """Case-insensitive match on title, excerpt, or any tag."""
        term = term.strip().lower()
        if not term:
            return self.items
        return [
            item for item in self.items
            if term in item.title.lower()
            or term in item.excerpt.lower()
            or any(term in tag.lower() for tag in item.tags)
        ]
