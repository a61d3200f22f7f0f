"""
db_errors: normalize native database driver errors into a typed taxonomy.

    from db_errors import wrap_error, is_not_null_violation

    try:
        conn.execute(stmt)
    except Exception as exc:
        err = wrap_error(exc)
        if is_not_null_violation(err):
            print(err.table, err.column)
"""

from .exceptions import (
    CONSTRAINT_KINDS,
    DBError,
    Dialect,
    ErrorShape,
    ViolationKind,
    detect_dialect,
    has_kind,
    inspect_error,
    is_check_violation,
    is_constraint_violation,
    is_data_error,
    is_db_error,
    is_foreign_key_violation,
    is_not_null_violation,
    is_unique_violation,
    translate_errors,
    wrap_error,
)

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
