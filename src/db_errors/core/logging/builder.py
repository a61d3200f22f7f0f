# src/db_errors/core/logging/builder.py
"""
Logging builder: create and apply a dictConfig logging configuration from Settings.

The library itself only ever calls `logging.getLogger(__name__)`; applications (and the test
suite) opt into this configuration with:

    from db_errors.config import get_settings
    from db_errors.core.logging import setup_logging

    setup_logging(get_settings())
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path

from db_errors.config.settings import Settings
from db_errors.utils.project import get_project_name

from .filters import DialectFilter, RedactFilter
from .formatters import ColorFormatter, JsonFormatter
from .handlers import (
    get_console_handler,
    get_error_console_handler,
    get_error_file_handler,
    get_file_handler,
)

LIBRARY_LOGGER = "db_errors"


def _writes_files(settings: Settings) -> bool:
    return (not settings.LOG_TO_STDOUT) and bool(settings.LOG_DIR)


def make_dict_config(settings: Settings) -> dict:
    """
    Build the dictConfig mapping using the provided settings.

    The returned mapping includes:
      - formatters: "standard" (ColorFormatter in text mode, plain otherwise) and "json"
      - filters: "dialect", "redact"
      - handlers: console, plus file/error_file OR error_console depending on LOG_TO_STDOUT
      - loggers: root and "db_errors"
    """
    formatters = {
        "standard": {
            "()": ColorFormatter if settings.LOG_FORMAT == "text" else logging.Formatter,
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(dialect)s | %(message)s",
        },
        "json": {
            "()": JsonFormatter,
            "env": settings.ENV,
            "service": get_project_name(default="db-errors"),
        },
    }

    filters = {
        "dialect": {"()": DialectFilter},
        "redact": {"()": RedactFilter, "allow_raw": settings.LOG_RAW_DB_MESSAGES},
    }

    handlers: dict[str, dict] = {"console": get_console_handler(settings)}

    if _writes_files(settings):
        handlers["file"] = get_file_handler(settings)
        handlers["error_file"] = get_error_file_handler(settings)
    else:
        handlers["error_console"] = get_error_console_handler(settings)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": filters,
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": list(handlers.keys()),
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            # Library records flow to the root handlers; only the level is set here.
            LIBRARY_LOGGER: {
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
        },
    }


def setup_logging(settings: Settings) -> None:
    """
    Initialize logging using settings.

    Steps:
      1. Ensure LOG_DIR exists when writing files.
      2. Apply dictConfig(make_dict_config(settings)).
      3. Register a DialectFilter on the root logger as a safety net for `%(dialect)s`.
    """
    if _writes_files(settings):
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(make_dict_config(settings))
    logging.getLogger().addFilter(DialectFilter())
