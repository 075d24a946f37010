"""Project configuration and paths.

Loads settings from config/settings.yaml and environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

# === Paths ===
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
DATA_DIR = PROJECT_ROOT / "data"
BUNDLED_CORPUS_PATH = PROJECT_ROOT / "src" / "story_writer" / "data" / "stories.json"

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")


class LLMSettings(BaseModel):
    """Chat-completion API settings."""
    api_url: str = "https://api.deepseek.com/v1/chat/completions"
    model: str = "deepseek-chat"
    request_timeout: float = Field(default=60.0, gt=0)
    resource_timeout: float = Field(default=120.0, gt=0)
    max_tokens: int = Field(default=2000, gt=0)
    temperature: float = Field(default=0.7, ge=0, le=2)
    story_max_tokens: int = Field(default=1500, gt=0)
    story_temperature: float = Field(default=0.8, ge=0, le=2)


class StorageSettings(BaseModel):
    """Local storage locations."""
    db_path: str = str(DATA_DIR / "story_engine.db")
    corpus_path: str = str(BUNDLED_CORPUS_PATH)


class Settings(BaseModel):
    """Top-level application settings."""
    llm: LLMSettings = Field(default_factory=LLMSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    example_count: int = Field(default=3, ge=0)

    @classmethod
    def load(cls, settings_path: Path | None = None) -> Settings:
        """Load settings from config/settings.yaml, falling back to defaults."""
        settings_path = settings_path or CONFIG_DIR / "settings.yaml"
        if settings_path.exists():
            with open(settings_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            return cls(**data)
        return cls()


def get_deepseek_api_key() -> str:
    """Get the DeepSeek API key from environment, or an empty string."""
    return os.getenv("DEEPSEEK_API_KEY", "").strip()


# Singleton settings instance
settings = Settings.load()
