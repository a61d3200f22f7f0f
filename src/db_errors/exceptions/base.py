"""
Normalized database error taxonomy.

Every classified native error becomes a single `DBError` carrying a `ViolationKind` tag.
Callers branch on capability predicates (`is_constraint_violation`, `is_not_null_violation`, ...)
which only look at that tag, so an error of kind NOT_NULL answers True for the not-null check,
the constraint-violation check and the database-error check at the same time.
"""

from enum import Enum
from typing import Any

from .detector import Dialect


# =================================================================================================================
# Violation kinds
# =================================================================================================================

class ViolationKind(str, Enum):
    NOT_NULL = "not_null"
    UNIQUE = "unique"
    FOREIGN_KEY = "foreign_key"
    CHECK = "check"
    DATA = "data"
    GENERIC_CONSTRAINT = "constraint"
    UNCLASSIFIED = "unclassified"

    @property
    def is_constraint(self) -> bool:
        return self in CONSTRAINT_KINDS

    @property
    def label(self) -> str:
        return _KIND_LABELS[self]


CONSTRAINT_KINDS = frozenset({
    ViolationKind.NOT_NULL,
    ViolationKind.UNIQUE,
    ViolationKind.FOREIGN_KEY,
    ViolationKind.CHECK,
    ViolationKind.GENERIC_CONSTRAINT,
})

_KIND_LABELS = {
    ViolationKind.NOT_NULL: "not-null violation",
    ViolationKind.UNIQUE: "unique violation",
    ViolationKind.FOREIGN_KEY: "foreign key violation",
    ViolationKind.CHECK: "check violation",
    ViolationKind.DATA: "invalid data",
    ViolationKind.GENERIC_CONSTRAINT: "constraint violation",
    ViolationKind.UNCLASSIFIED: "database error",
}


# =================================================================================================================
# Wrapped error
# =================================================================================================================

class DBError(Exception):
    """
    A native database error normalized into the taxonomy.

    - kind: ViolationKind tag; the only input of the capability predicates
    - dialect: engine family the native error was recognized as
    - table / column / constraint / schema: identifiers extracted verbatim (None when unknown)
    - columns: every column involved (multi-column unique or foreign keys); `column` is only
      set when exactly one column is known
    - native_error: the exact object passed to `wrap_error`, untouched

    Instances are read-only after construction.
    """

    def __init__(
        self,
        kind: ViolationKind,
        *,
        native_error: Any,
        dialect: Dialect = Dialect.UNKNOWN,
        table: str | None = None,
        column: str | None = None,
        columns: tuple[str, ...] | list[str] | None = None,
        constraint: str | None = None,
        schema: str | None = None,
    ):
        cols = tuple(columns) if columns else ((column,) if column else ())
        if column is None and len(cols) == 1:
            column = cols[0]

        self._kind = ViolationKind(kind)
        self._dialect = dialect
        self._table = table
        self._column = column
        self._columns = cols
        self._constraint = constraint
        self._schema = schema
        self._native_error = native_error
        self._message = _build_message(self._kind, table, cols, constraint)
        super().__init__(self._message)

    @property
    def kind(self) -> ViolationKind:
        return self._kind

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    @property
    def table(self) -> str | None:
        return self._table

    @property
    def column(self) -> str | None:
        return self._column

    @property
    def columns(self) -> tuple[str, ...]:
        return self._columns

    @property
    def constraint(self) -> str | None:
        return self._constraint

    @property
    def schema(self) -> str | None:
        return self._schema

    @property
    def message(self) -> str:
        return self._message

    @property
    def native_error(self) -> Any:
        return self._native_error

    def __str__(self) -> str:
        return self._message

    def __repr__(self) -> str:
        return (
            f"DBError(kind={self._kind.value!r}, dialect={self._dialect.value!r}, "
            f"table={self._table!r}, column={self._column!r}, constraint={self._constraint!r})"
        )

    def to_payload(self) -> dict:
        """
        Return a JSON-serializable dict describing the error.

        Shape:
            {
                "kind": "not_null",
                "detail": "not-null violation (table: users; column: email)",
                "dialect": "postgres",
                "table": "users",        # only the fields that are known
                "columns": ["email"],
            }
        The raw native message is never included (it may contain row values).
        """
        payload: dict[str, Any] = {
            "kind": self._kind.value,
            "detail": self._message,
            "dialect": self._dialect.value,
        }
        if self._schema:
            payload["schema"] = self._schema
        if self._table:
            payload["table"] = self._table
        if self._columns:
            payload["columns"] = list(self._columns)
        if self._constraint:
            payload["constraint"] = self._constraint
        return payload


def _build_message(kind: ViolationKind, table: str | None, columns: tuple[str, ...],
                   constraint: str | None) -> str:
    parts = []
    if table:
        parts.append(f"table: {table}")
    if columns:
        parts.append(f"column{'s' if len(columns) > 1 else ''}: {', '.join(columns)}")
    if constraint:
        parts.append(f"constraint: {constraint}")
    if parts:
        return f"{kind.label} ({'; '.join(parts)})"
    return kind.label


# =================================================================================================================
# Capability predicates
# =================================================================================================================

def is_db_error(value: Any) -> bool:
    return isinstance(value, DBError)


def has_kind(value: Any, kind: ViolationKind) -> bool:
    return isinstance(value, DBError) and value.kind is kind


def is_constraint_violation(value: Any) -> bool:
    return isinstance(value, DBError) and value.kind in CONSTRAINT_KINDS


def is_not_null_violation(value: Any) -> bool:
    return has_kind(value, ViolationKind.NOT_NULL)


def is_unique_violation(value: Any) -> bool:
    return has_kind(value, ViolationKind.UNIQUE)


def is_foreign_key_violation(value: Any) -> bool:
    return has_kind(value, ViolationKind.FOREIGN_KEY)


def is_check_violation(value: Any) -> bool:
    return has_kind(value, ViolationKind.CHECK)


def is_data_error(value: Any) -> bool:
    return has_kind(value, ViolationKind.DATA)


__all__ = [
    "ViolationKind",
    "CONSTRAINT_KINDS",
    "DBError",
    "is_db_error",
    "has_kind",
    "is_constraint_violation",
    "is_not_null_violation",
    "is_unique_violation",
    "is_foreign_key_violation",
    "is_check_violation",
    "is_data_error",
]


r"""
# =================================================================================================================
# Branching on a normalized error
# =================================================================================================================

```
    from db_errors import wrap_error, is_not_null_violation, is_unique_violation

    try:
        session.flush()
    except Exception as exc:
        err = wrap_error(exc)
        if is_not_null_violation(err):
            raise MissingFieldError(err.column)
        if is_unique_violation(err):
            raise DuplicateError(fields=err.columns)
        raise
```

| Kind                 | is_db_error | is_constraint_violation | narrow predicate          |
| -------------------- | ----------- | ----------------------- | ------------------------- |
| `NOT_NULL`           | True        | True                    | `is_not_null_violation`   |
| `UNIQUE`             | True        | True                    | `is_unique_violation`     |
| `FOREIGN_KEY`        | True        | True                    | `is_foreign_key_violation`|
| `CHECK`              | True        | True                    | `is_check_violation`      |
| `GENERIC_CONSTRAINT` | True        | True                    | `has_kind(...)`           |
| `DATA`               | True        | False                   | `is_data_error`           |

Anything `wrap_error` could not classify is returned as-is, so every predicate is False for it.
"""
