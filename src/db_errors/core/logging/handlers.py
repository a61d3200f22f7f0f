# src/db_errors/core/logging/handlers.py
"""
Handler factories for logging.dictConfig.

Each helper returns a handler configuration dictionary (not a handler instance) so the
builder can assemble one dictConfig mapping from the validated Settings object.

All handlers attach the "dialect" and "redact" filters declared by the builder:
  - dialect: guarantees `%(dialect)s` is available to the text formatter
  - redact: scrubs raw driver messages unless LOG_RAW_DB_MESSAGES is enabled
"""

from pathlib import Path

from db_errors.config.settings import Settings

HANDLER_FILTERS = ["dialect", "redact"]


def _formatter_name(settings: Settings) -> str:
    # The builder's "formatters" mapping defines both "json" and "standard".
    return "json" if settings.LOG_FORMAT == "json" else "standard"


def get_console_handler(settings: Settings) -> dict:
    """
    Return a StreamHandler configuration (stderr by default).

    Keys:
        - "class": stdlib handler class path
        - "formatter": "json" when LOG_FORMAT == "json", otherwise "standard"
        - "level": settings.LOG_LEVEL
        - "filters": names declared in the dictConfig "filters" section
    """
    return {
        "class": "logging.StreamHandler",
        "formatter": _formatter_name(settings),
        "level": settings.LOG_LEVEL,
        "filters": list(HANDLER_FILTERS),
    }


def get_file_handler(settings: Settings) -> dict:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": _formatter_name(settings),
        "level": settings.LOG_LEVEL,
        "filename": str(Path(settings.LOG_DIR) / "db_errors.log"),
        "maxBytes": settings.LOG_MAX_BYTES,
        "backupCount": settings.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
        "filters": list(HANDLER_FILTERS),
    }


# Error-specific rotating file (classification failures logged with logger.exception).
def get_error_file_handler(settings: Settings) -> dict:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": "json",
        "level": "ERROR",
        "filename": str(Path(settings.LOG_DIR) / "errors.log"),
        "maxBytes": settings.LOG_MAX_BYTES,
        "backupCount": settings.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
        "filters": list(HANDLER_FILTERS),
    }


def get_error_console_handler(settings: Settings) -> dict:
    return {
        "class": "logging.StreamHandler",
        "formatter": "json",
        "level": "ERROR",
        "filters": list(HANDLER_FILTERS),
    }
