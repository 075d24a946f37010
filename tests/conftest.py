"""Shared test fixtures for Story Engine."""

import json
import sys
import uuid
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Ensure src is importable
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.common.config import LLMSettings, Settings, StorageSettings
from src.common.database import KeyValueStore
from src.common.models import Item


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture(autouse=True)
def no_env_api_key(monkeypatch):
    """Keep a developer's real DEEPSEEK_API_KEY out of the tests."""
    monkeypatch.delenv("DEEPSEEK_API_KEY", raising=False)


@pytest.fixture
def kv(tmp_path) -> KeyValueStore:
    """Provide a key/value store backed by a temporary SQLite database."""
    return KeyValueStore(str(tmp_path / "test_story_engine.db"))


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing storage at a temporary directory."""
    return Settings(
        llm=LLMSettings(api_url="https://llm.test/v1/chat/completions"),
        storage=StorageSettings(
            db_path=str(tmp_path / "test_story_engine.db"),
            corpus_path=str(tmp_path / "stories.json"),
        ),
    )


@pytest.fixture
def sample_items() -> list[Item]:
    """Three human-authored stories and one generated one."""
    return [
        Item(
            id="a1",
            title="Everything Has an Explanation",
            date="Side A",
            excerpt="Everything has an explanation...",
            body="Everything has an explanation. You simply forgot to plug it in.",
            tags=["logic", "mysticism"],
        ),
        Item(
            id="a2",
            title="Information",
            date="Side A",
            excerpt="Information, a strange word...",
            body="Information is born in interaction. The flower simply grows.",
            tags=["flower", "universe"],
        ),
        Item(
            id="b1",
            title="25 Minutes",
            date="Side B",
            excerpt="25 minutes, not very much and not very little...",
            body="25 minutes is a strange quantity: cool but not cold.",
            tags=["time", "movement"],
        ),
        Item(
            id="ai_0000ABCD",
            title="A Generated One",
            date="1/1/26",
            excerpt="Written by the model.",
            body="Written by the model.",
            tags=["AI", "generated"],
        ),
    ]


@pytest.fixture
def corpus_file(tmp_path, sample_items) -> Path:
    """Write the sample items to a corpus JSON file."""
    path = tmp_path / "stories.json"
    path.write_text(
        json.dumps([i.to_dict() for i in sample_items], ensure_ascii=False),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def fixed_ids():
    """Deterministic UUID source: 11111111-..., 22222222-..., ..."""
    counter = iter(range(1, 100))

    def factory() -> uuid.UUID:
        n = next(counter)
        return uuid.UUID(int=int(f"{n:x}" * 32, 16) if n < 16 else n)

    return factory


def make_response(status: int = 200, body: bytes | str | dict = b"") -> MagicMock:
    """Build a fake streamed requests.Response."""
    if isinstance(body, dict):
        body = json.dumps(body, ensure_ascii=False)
    if isinstance(body, str):
        body = body.encode("utf-8")
    resp = MagicMock()
    resp.status_code = status
    resp.iter_content.return_value = [body]
    return resp


def completion_body(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.fixture
def mock_session() -> MagicMock:
    """A requests.Session stand-in; tests set ``post.return_value``."""
    return MagicMock()


@pytest.fixture
def response_factory():
    return make_response


@pytest.fixture
def ok_response():
    """Factory for a 200 response carrying one completion choice."""
    def factory(content: str) -> MagicMock:
        return make_response(200, completion_body(content))
    return factory
