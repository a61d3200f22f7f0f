# src/db_errors/tests/test_logging/test_builder_setup.py
import logging

import pytest

from db_errors.config.settings import Settings
from db_errors.core.logging.builder import LIBRARY_LOGGER, make_dict_config, setup_logging
from db_errors.core.logging.filters import DialectFilter


def make_settings(tmp_path, **overrides) -> Settings:
    values = dict(
        ENV="testing",
        LOG_FORMAT="json",
        LOG_LEVEL="INFO",
        LOG_TO_STDOUT=False,
        LOG_DIR=tmp_path,
        LOG_MAX_BYTES=1000,
        LOG_BACKUP_COUNT=1,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def restore_logging():
    # setup_logging reconfigures the root logger; put back the suite's stdout configuration
    yield
    setup_logging(Settings(ENV="testing", LOG_LEVEL="DEBUG", LOG_FORMAT="text", LOG_TO_STDOUT=True))


def test_make_dict_config_with_files(tmp_path):
    cfg = make_dict_config(make_settings(tmp_path))

    assert set(cfg["handlers"]) == {"console", "file", "error_file"}
    assert cfg["handlers"]["file"]["filename"].endswith("db_errors.log")
    assert cfg["handlers"]["console"]["formatter"] == "json"
    assert LIBRARY_LOGGER in cfg["loggers"]


def test_make_dict_config_stdout_only(tmp_path):
    cfg = make_dict_config(make_settings(tmp_path, LOG_TO_STDOUT=True, LOG_FORMAT="text"))

    assert set(cfg["handlers"]) == {"console", "error_console"}
    assert cfg["handlers"]["console"]["formatter"] == "standard"


def test_redact_filter_follows_settings(tmp_path):
    cfg = make_dict_config(make_settings(tmp_path, LOG_RAW_DB_MESSAGES=True))

    assert cfg["filters"]["redact"]["allow_raw"] is True
    for handler in cfg["handlers"].values():
        assert handler["filters"] == ["dialect", "redact"]


def test_setup_logging_creates_log_dir_and_writes(tmp_path, restore_logging):
    settings = make_settings(tmp_path / "logs")
    # ensure DIR does not exist
    assert not settings.LOG_DIR.exists()

    setup_logging(settings)

    # setup should create log dir
    assert settings.LOG_DIR.exists()
    root = logging.getLogger()
    assert any(isinstance(f, DialectFilter) for f in root.filters)

    logging.getLogger("db_errors.exceptions.mapper").warning(
        "db_errors.translated", extra={"dialect": "postgres", "raw": "alice@example.com"}
    )
    for handler in root.handlers:
        handler.flush()

    text = (settings.LOG_DIR / "db_errors.log").read_text()
    assert "db_errors.translated" in text
    assert '"dialect": "postgres"' in text
    assert "alice@example.com" not in text
