"""
Core pytest configuration for the entire test suite.

Domain-specific fixtures live in:
- tests/test_fixtures/database_fixtures.py   (real SQLite engines producing native errors)
- tests/test_fixtures/native_errors.py        (driver-shaped fake exceptions, plain helpers)
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# -------------------------------
# Early logging tuning
# -------------------------------
# Keep third-party loggers quiet before importing modules that initialize them.
NOISY_LOGGERS = (
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "aiosqlite",
    "asyncio",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

# ------------------------------------------------------------------------------------------------
# PATH PATCHING
# ------------------------------------------------------------------------------------------------

# Ensure 'src' on sys.path so `import db_errors...` works without an editable install
SRC = Path(__file__).resolve().parents[2]
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest

from db_errors.config.settings import Settings
from db_errors.core.logging.builder import setup_logging


# Installed once per session; DEBUG so the normalizer's decision records are emitted (caplog).
@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    setup_logging(Settings(ENV="testing", LOG_LEVEL="DEBUG", LOG_FORMAT="text", LOG_TO_STDOUT=True))
    yield


# Database fixtures
from .test_fixtures.database_fixtures import (  # noqa: E402
    the_table,
    sqlite_engine,
    async_sqlite_engine,
)
