"""Story Writer: generate short stories in the author's style.

Pipeline: prompts -> chat-completion client -> parser -> generated store.
The bundled corpus supplies the style examples; generated stories are
never used as examples.

Usage:
    writer = StoryWriter()
    story = writer.generate(topic="waiting")
    # story is already merged into writer.store and writer.gallery
"""

from __future__ import annotations

import random
import uuid
from collections.abc import Callable
from datetime import datetime

import requests

from src.common.config import Settings
from src.common.database import KeyValueStore
from src.common.logging import setup_logging
from src.common.models import Item

from .client import ChatCompletionClient
from .corpus import load_corpus
from .credentials import CredentialStore
from .gallery import StoryGallery
from .models import WriterConfig
from .parser import parse_story
from .prompts import build_prompt
from .store import GeneratedItemStore

logger = setup_logging(module_name="story_writer")


class StoryWriter:
    """Generates stories and keeps the local story collection in sync.

    Dependencies are injectable for tests: a settings object, a key/value
    store, an HTTP session, a corpus, and random/id/clock sources.
    """

    def __init__(
        self,
        config: WriterConfig | None = None,
        settings: Settings | None = None,
        kv: KeyValueStore | None = None,
        session: requests.Session | None = None,
        corpus: list[Item] | None = None,
        rng: random.Random | None = None,
        id_factory: Callable[[], uuid.UUID] = uuid.uuid4,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.config = config or WriterConfig()
        self.settings = settings or Settings.load()
        self._kv = kv or KeyValueStore(self.settings.storage.db_path)
        self.credentials = CredentialStore(self._kv)
        self.store = GeneratedItemStore(self._kv)
        self.corpus = (
            corpus if corpus is not None
            else load_corpus(self.settings.storage.corpus_path)
        )
        self.gallery = StoryGallery(self.corpus, self.store)

        llm = self.settings.llm
        if self.config.model:
            llm = llm.model_copy(update={"model": self.config.model})
        self.client = ChatCompletionClient(
            api_key=self.credentials.load(),
            llm_settings=llm,
            session=session,
        )

        self._rng = rng
        self._id_factory = id_factory
        self._clock = clock

    # --- State ---

    @property
    def is_generating(self) -> bool:
        return self.client.is_busy

    # --- Credentials ---

    def has_api_key(self) -> bool:
        return bool(self.client.api_key)

    def save_api_key(self, key: str) -> str:
        """Store ``key`` and return it trimmed. A blank key deletes the stored one."""
        stored = self.credentials.save(key)
        self.client.api_key = stored or self.credentials.load()
        return stored

    def delete_api_key(self) -> None:
        self.credentials.delete()
        self.client.api_key = self.credentials.load()

    # --- Generation ---

    def generate(self, topic: str | None = None) -> Item:
        """Generate a new story and merge it into the local collection.

        Args:
            topic: Optional story topic; empty means free topic.

        Returns:
            The generated story item.

        Raises:
            GenerationError: Any failure of the chat-completion call, or
                IdGenerationError when no unique story id could be drawn.
        """
        system_prompt, user_prompt = build_prompt(
            topic,
            self.corpus,
            rng=self._rng,
            example_count=(
                self.config.example_count
                if self.config.example_count is not None
                else self.settings.example_count
            ),
        )
        logger.info(
            "Generating story (topic=%r, corpus=%d stories)",
            topic or "", len(self.corpus),
        )

        text = self.client.complete(
            system_prompt,
            user_prompt,
            temperature=(
                self.config.temperature
                if self.config.temperature is not None
                else self.settings.llm.story_temperature
            ),
            max_tokens=self.config.max_tokens or self.settings.llm.story_max_tokens,
        )

        item = parse_story(
            text,
            generated_at=self._clock(),
            id_factory=self._id_factory,
            taken_ids={i.id for i in self.gallery.items},
        )
        self.save_generated(item)

        logger.info("Story generated: %s (%s)", item.title, item.id)
        return item

    def save_generated(self, item: Item) -> bool:
        """Merge a generated story into the store and the gallery."""
        return self.store.merge(item)
