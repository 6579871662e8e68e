"""Tests for configuration and logging setup."""

import io
import json
import logging
from pathlib import Path

import pytest

from booksy.config import Config, get_config, reset_config
from booksy.logging_config import setup_logging


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "BOOKSY_DB_PATH",
        "BOOKSY_USER",
        "BOOKSY_WORDS_PER_PAGE",
        "BOOKSY_LOG_LEVEL",
        "BOOKSY_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


class TestConfig:
    """Tests for Config.from_env()."""

    def test_defaults(self):
        config = Config.from_env()

        assert config.db_path == Path.home() / ".booksy" / "booksy.db"
        assert config.default_user == "local"
        assert config.words_per_page == 250
        assert config.log_level == "WARNING"
        assert config.log_format == "text"

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("BOOKSY_DB_PATH", str(tmp_path / "lib.db"))
        monkeypatch.setenv("BOOKSY_USER", "alice")
        monkeypatch.setenv("BOOKSY_WORDS_PER_PAGE", "120")
        monkeypatch.setenv("BOOKSY_LOG_LEVEL", "debug")
        monkeypatch.setenv("BOOKSY_LOG_FORMAT", "JSON")

        config = Config.from_env()

        assert config.db_path == tmp_path / "lib.db"
        assert config.default_user == "alice"
        assert config.words_per_page == 120
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"

    def test_memory_db(self, monkeypatch):
        monkeypatch.setenv("BOOKSY_DB_PATH", ":memory:")
        assert Config.from_env().is_memory_db

    def test_validate_ok(self, monkeypatch, tmp_path):
        monkeypatch.setenv("BOOKSY_DB_PATH", str(tmp_path / "nested" / "lib.db"))
        config = Config.from_env()

        assert config.validate() == []
        assert (tmp_path / "nested").exists()

    def test_validate_errors(self, monkeypatch):
        monkeypatch.setenv("BOOKSY_DB_PATH", ":memory:")
        monkeypatch.setenv("BOOKSY_WORDS_PER_PAGE", "0")
        monkeypatch.setenv("BOOKSY_LOG_LEVEL", "LOUD")
        monkeypatch.setenv("BOOKSY_LOG_FORMAT", "xml")

        errors = Config.from_env().validate()

        assert len(errors) == 3

    def test_get_config_is_cached(self):
        assert get_config() is get_config()


class TestLogging:
    """Tests for setup_logging()."""

    def test_text_format(self):
        stream = io.StringIO()
        logger = setup_logging("INFO", "text", stream=stream)

        logging.getLogger("booksy.reader.session").info("opened")

        assert logger.name == "booksy"
        assert " - INFO - booksy.reader.session - opened" in stream.getvalue()

    def test_json_format(self):
        stream = io.StringIO()
        setup_logging("WARNING", "json", stream=stream)

        logging.getLogger("booksy.reader").warning("rejected %s", "font_size")

        entry = json.loads(stream.getvalue().strip())
        assert entry["level"] == "WARNING"
        assert entry["logger"] == "booksy.reader"
        assert entry["message"] == "rejected font_size"

    def test_level_filters(self):
        stream = io.StringIO()
        setup_logging("WARNING", stream=stream)

        logging.getLogger("booksy.db").info("quiet")

        assert stream.getvalue() == ""

    def test_no_duplicate_handlers(self):
        setup_logging("INFO")
        logger = setup_logging("INFO")
        assert len(logger.handlers) == 1
