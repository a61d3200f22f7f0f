import pytest
from pydantic import ValidationError

from db_errors.config.settings import Settings, get_settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("ENV", "LOG_LEVEL", "LOG_FORMAT", "LOG_TO_STDOUT", "LOG_RAW_DB_MESSAGES"):
        monkeypatch.delenv(f"DB_ERRORS_{name}", raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


def test_defaults(clean_env):
    settings = Settings(_env_file=None)

    assert settings.LOG_LEVEL == "INFO"
    assert settings.LOG_FORMAT == "json"
    assert settings.LOG_TO_STDOUT is True
    assert settings.LOG_RAW_DB_MESSAGES is False


def test_reads_prefixed_environment(clean_env):
    clean_env.setenv("DB_ERRORS_LOG_LEVEL", "debug")
    clean_env.setenv("DB_ERRORS_LOG_FORMAT", "TEXT")
    clean_env.setenv("DB_ERRORS_LOG_RAW_DB_MESSAGES", "true")

    settings = get_settings()

    # values are normalized before validation
    assert settings.LOG_LEVEL == "DEBUG"
    assert settings.LOG_FORMAT == "text"
    assert settings.LOG_RAW_DB_MESSAGES is True


def test_unprefixed_variables_are_ignored(clean_env):
    clean_env.setenv("LOG_LEVEL", "ERROR")
    assert Settings(_env_file=None).LOG_LEVEL == "INFO"


def test_get_settings_is_cached(clean_env):
    assert get_settings() is get_settings()


@pytest.mark.parametrize("field, value", [
    ("LOG_LEVEL", "verbose"),
    ("LOG_FORMAT", "xml"),
    ("ENV", "qa"),
])
def test_invalid_values_are_rejected(clean_env, field, value):
    clean_env.setenv(f"DB_ERRORS_{field}", value)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
