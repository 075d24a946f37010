"""API key persistence.

The key is stored as a single setting in the local key/value store and is
trimmed of surrounding whitespace on every read and write.
"""

from __future__ import annotations

from src.common.config import get_deepseek_api_key
from src.common.database import KeyValueStore
from src.common.logging import setup_logging

logger = setup_logging(module_name="story_writer.credentials")

API_KEY_SETTING = "deepseek_api_key"


class CredentialStore:
    """Load, save and delete the chat-completion API key.

    When nothing is stored, ``load()`` falls back to ``DEEPSEEK_API_KEY``
    from the environment (or ``.env``) unless ``env_fallback`` is off.
    """

    def __init__(self, kv: KeyValueStore, env_fallback: bool = True) -> None:
        self._kv = kv
        self._env_fallback = env_fallback

    def load(self) -> str:
        stored = (self._kv.get(API_KEY_SETTING) or "").strip()
        if stored:
            return stored
        if self._env_fallback:
            return get_deepseek_api_key()
        return ""

    def save(self, key: str) -> str:
        """Persist the trimmed key. A blank key clears the stored value.

        Returns:
            The trimmed key actually stored.
        """
        cleaned = (key or "").strip()
        if not cleaned:
            self.delete()
            return ""
        self._kv.set(API_KEY_SETTING, cleaned)
        logger.info("API key saved (length: %d characters)", len(cleaned))
        return cleaned

    def delete(self) -> None:
        if self._kv.delete(API_KEY_SETTING):
            logger.info("API key deleted")

    @property
    def is_configured(self) -> bool:
        return bool(self.load())
