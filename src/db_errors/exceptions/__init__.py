from .base import (
    CONSTRAINT_KINDS,
    DBError,
    ViolationKind,
    has_kind,
    is_check_violation,
    is_constraint_violation,
    is_data_error,
    is_db_error,
    is_foreign_key_violation,
    is_not_null_violation,
    is_unique_violation,
)
from .detector import Dialect, ErrorShape, detect_dialect, inspect_error
from .mapper import translate_errors, wrap_error

# db_errors/
# │
# ├── exceptions/
# │   ├── __init__.py
# │   ├── base.py          # DBError, ViolationKind, capability predicates
# │   ├── detector.py      # ErrorShape snapshot + dialect detection
# │   ├── parsers/         # one parser per dialect (postgres, mysql, sqlite) + shared helpers
# │   └── mapper.py        # wrap_error() entry point, translate_errors() context manager

__all__ = [
    "CONSTRAINT_KINDS",
    "DBError",
    "Dialect",
    "ErrorShape",
    "ViolationKind",
    "detect_dialect",
    "has_kind",
    "inspect_error",
    "is_check_violation",
    "is_constraint_violation",
    "is_data_error",
    "is_db_error",
    "is_foreign_key_violation",
    "is_not_null_violation",
    "is_unique_violation",
    "translate_errors",
    "wrap_error",
]
