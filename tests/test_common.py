"""Tests for shared common modules: models, database, config, logging."""

import io
import logging
from pathlib import Path

import pytest

from src.common.config import LLMSettings, Settings, get_deepseek_api_key
from src.common.database import KeyValueStore, get_connection, init_db
from src.common.logging import setup_logging
from src.common.models import AI_ID_PREFIX, Item


class TestItem:
    def test_wire_aliases(self):
        item = Item.from_dict({
            "id": "a1",
            "title": "Information",
            "date": "Side A",
            "excerpt": "Information...",
            "content": "Information is born in interaction.",
            "tags": ["flower"],
            "associatedImageId": "img-3",
        })
        assert item.body == "Information is born in interaction."
        assert item.image_ref == "img-3"

    def test_to_dict_uses_wire_names(self):
        item = Item(id="a1", title="T", body="B", image_ref=None)
        d = item.to_dict()
        assert d["content"] == "B"
        assert "associatedImageId" in d
        assert "body" not in d

    def test_dict_roundtrip(self):
        item = Item(id="a1", title="T", date="D", excerpt="E", body="B", tags=["x", "y"])
        assert Item.from_dict(item.to_dict()) == item

    def test_is_generated(self):
        assert Item(id=f"{AI_ID_PREFIX}1234ABCD", title="T").is_generated
        assert not Item(id="a1", title="T").is_generated

    def test_frozen(self):
        item = Item(id="a1", title="T")
        with pytest.raises(Exception):
            item.title = "other"

    def test_id_required(self):
        with pytest.raises(Exception):
            Item(id="", title="T")


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.llm.model == "deepseek-chat"
        assert s.llm.request_timeout == 60
        assert s.llm.resource_timeout == 120
        assert s.llm.temperature == 0.7
        assert s.llm.max_tokens == 2000
        assert s.example_count == 3

    def test_load_from_yaml(self, tmp_path: Path):
        path = tmp_path / "settings.yaml"
        path.write_text("llm:\n  model: other-model\n  temperature: 1.1\n", encoding="utf-8")
        s = Settings.load(path)
        assert s.llm.model == "other-model"
        assert s.llm.temperature == 1.1
        assert s.llm.max_tokens == 2000

    def test_load_missing_file_uses_defaults(self, tmp_path: Path):
        s = Settings.load(tmp_path / "nope.yaml")
        assert s == Settings()

    def test_temperature_bounds(self):
        with pytest.raises(Exception):
            LLMSettings(temperature=2.5)

    def test_env_api_key_trimmed(self, monkeypatch):
        monkeypatch.setenv("DEEPSEEK_API_KEY", "  sk-env  ")
        assert get_deepseek_api_key() == "sk-env"

    def test_env_api_key_missing(self):
        assert get_deepseek_api_key() == ""


class TestDatabase:
    def test_init_db_creates_settings_table(self, tmp_path: Path):
        db_path = str(tmp_path / "test.db")
        init_db(db_path)
        conn = get_connection(db_path)
        try:
            cursor = conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
            )
            tables = [row["name"] for row in cursor.fetchall()]
            assert "settings" in tables
        finally:
            conn.close()

    def test_set_and_get(self, kv: KeyValueStore):
        kv.set("deepseek_api_key", "sk-1")
        assert kv.get("deepseek_api_key") == "sk-1"

    def test_overwrite(self, kv: KeyValueStore):
        kv.set("k", "one")
        kv.set("k", "two")
        assert kv.get("k") == "two"

    def test_get_missing(self, kv: KeyValueStore):
        assert kv.get("missing") is None

    def test_delete(self, kv: KeyValueStore):
        kv.set("k", "v")
        assert kv.delete("k") is True
        assert kv.get("k") is None
        assert kv.delete("k") is False

    def test_persists_across_instances(self, tmp_path: Path):
        db_path = str(tmp_path / "shared.db")
        KeyValueStore(db_path).set("k", "v")
        assert KeyValueStore(db_path).get("k") == "v"


class TestLogging:
    def test_setup_logging_is_idempotent(self):
        first = setup_logging(module_name="story_engine.test")
        second = setup_logging(module_name="story_engine.test")
        assert first is second
        assert len(first.handlers) == 1

    def test_level(self):
        logger = setup_logging(level=logging.DEBUG, module_name="story_engine.test_debug")
        assert logger.level == logging.DEBUG

    def test_env_level(self, monkeypatch):
        monkeypatch.setenv("STORY_ENGINE_LOG_LEVEL", "warning")
        logger = setup_logging(module_name="story_engine.test_env")
        assert logger.level == logging.WARNING

    def test_unknown_env_level_defaults_to_info(self, monkeypatch):
        monkeypatch.setenv("STORY_ENGINE_LOG_LEVEL", "chatty")
        logger = setup_logging(module_name="story_engine.test_env_bad")
        assert logger.level == logging.INFO

    def test_custom_stream(self):
        buf = io.StringIO()
        logger = setup_logging(module_name="story_engine.test_stream", stream=buf)
        logger.info("hello")
        assert "[INFO] story_engine.test_stream: hello" in buf.getvalue()
