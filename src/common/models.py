"""Shared Pydantic data models for Story Engine.

``Item`` is the one record type that flows through every part of the
system: the bundled corpus, the prompt examples, the parsed model output,
and the persisted collection of generated stories.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# Marks an item as produced by the generation pipeline
AI_ID_PREFIX = "ai_"


class Item(BaseModel):
    """A short text artifact: a human-authored story or a generated one.

    Field names on the wire follow the bundled ``stories.json`` format
    (``content``, ``associatedImageId``); use ``to_dict()`` to serialize.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    title: str
    date: str = ""
    excerpt: str = ""
    body: str = Field(default="", alias="content")
    tags: list[str] = Field(default_factory=list)
    image_ref: str | None = Field(default=None, alias="associatedImageId")

    @property
    def is_generated(self) -> bool:
        return self.id.startswith(AI_ID_PREFIX)

    def to_dict(self) -> dict:
        """Serialize using the wire field names."""
        return self.model_dump(by_alias=True)

    @classmethod
    def from_dict(cls, data: dict) -> Item:
        return cls.model_validate(data)
