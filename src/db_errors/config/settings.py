from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Library settings loaded from the environment (prefix `DB_ERRORS_`) or a `.env` file.

    Only the logging setup reads these; `wrap_error()` itself has no configuration.
    """

    # Environment
    ENV: Literal["development", "testing", "staging", "production"] = "development"

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"
    LOG_TO_STDOUT: bool = True
    LOG_DIR: Path = Path("/var/log/db-errors")
    LOG_MAX_BYTES: int = 10_000_000  # 10 MB
    LOG_BACKUP_COUNT: int = 5

    # Raw driver messages can contain row values (emails, names, ...); keep them out of logs by default.
    LOG_RAW_DB_MESSAGES: bool = False

    # --- Validators ---
    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str | None) -> str | None:
        """
        Normalize LOG_LEVEL to upper case before Literal validation, so `DB_ERRORS_LOG_LEVEL=debug`
        is accepted.
        """
        return v.upper() if isinstance(v, str) else v

    @field_validator("LOG_FORMAT", mode="before")
    @classmethod
    def normalize_log_format(cls, v: str | None) -> str | None:
        return v.lower() if isinstance(v, str) else v

    model_config = SettingsConfigDict(
        env_prefix="DB_ERRORS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# get_settings() takes no arguments and always returns the same settings from the environment,
# so it is cached with @lru_cache(). Call get_settings.cache_clear() after changing the environment.
@lru_cache()
def get_settings() -> Settings:
    return Settings()
