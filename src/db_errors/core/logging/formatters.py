# src/db_errors/core/logging/formatters.py

"""
Custom logging formatters.

  - JsonFormatter: structured JSON lines for log collectors. Includes the observability
    fields (service, env, version, dialect) and every `extra` passed at the call site, so the
    normalizer's structured context (kind, table, column, constraint, sqlstate, errno) becomes
    queryable fields.

  - ColorFormatter: compact, ANSI-colored lines for local development consoles.

The builder (dictConfig) selects between them based on Settings.LOG_FORMAT.
"""

import json
import logging
from logging import LogRecord
from typing import Any

from db_errors.utils.project import get_project_version

PROJECT_VERSION = get_project_version()

# Attributes every LogRecord carries; anything else on the record came in through `extra`.
_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """
    Structured JSON formatter.

    Construction:
      - env: environment name (e.g., "development" | "production"); optional.
      - service: logical service name to include in logs.
      - datefmt: optional date format passed to logging.Formatter (used by formatTime).

    Non-JSON-serializable extras are converted with str(); format() never raises.
    """

    def __init__(self, *, env: str | None = None, service: str = "db-errors", datefmt: str | None = None):
        super().__init__(datefmt=datefmt)
        self.env = env
        self.service = service

    def format(self, record: LogRecord) -> str:
        log_record: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "pathname": record.pathname,
            "lineno": record.lineno,
            "dialect": getattr(record, "dialect", "-"),
            "service": self.service,
            "env": self.env,
            "version": PROJECT_VERSION,
        }

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            log_record["stack_info"] = self.formatStack(record.stack_info)

        for k, v in record.__dict__.items():
            if k in _STANDARD_ATTRS or k in log_record or k.startswith("_"):
                continue
            try:
                json.dumps(v)
                log_record[k] = v
            except Exception:
                # Fall back to a string representation for non-serializable values.
                log_record[k] = str(v)

        return json.dumps(log_record, ensure_ascii=False, default=str)


class ColorFormatter(logging.Formatter):
    """
    Development-friendly colored formatter.

    Line layout: TIMESTAMP | LEVEL | LOGGER_NAME | DIALECT | MESSAGE, with the traceback
    appended on a new line when exc_info is set. Only the level name is colorized.
    """

    COLOR_CODES = {
        "DEBUG": "\033[1;36;47m",   # bold cyan on white
        "INFO": "\033[32m",         # green
        "WARNING": "\033[33m",      # yellow
        "ERROR": "\033[31m",        # red
        "CRITICAL": "\033[1;41m",   # bold on red background
        "RESET": "\033[0m",
    }

    def __init__(self, fmt: str | None = None, datefmt: str | None = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)

    def format(self, record: LogRecord) -> str:
        color = self.COLOR_CODES.get(record.levelname, "")
        reset = self.COLOR_CODES["RESET"]
        timestamp = self.formatTime(record, self.datefmt)

        base = (
            f"{timestamp} | {color}{record.levelname:<10}{reset} | "
            f"{record.name:<30} | "
            f"{getattr(record, 'dialect', '-'):<8} | "
            f"{record.getMessage()}"
        )

        if record.exc_info:
            base = base + "\n" + self.formatException(record.exc_info)

        return base
