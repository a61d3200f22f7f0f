import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from sqlalchemy.exc import StatementError

logger = logging.getLogger(__name__)


class Dialect(str, Enum):
    POSTGRES = "postgres"
    MYSQL = "mysql"
    SQLITE = "sqlite"
    UNKNOWN = "unknown"


# =================================================================================================================
# Native error shape
# =================================================================================================================

# SQLSTATE: five upper-case alphanumerics with at least one digit ("23502", "23P01", "XX000").
_SQLSTATE_RE = re.compile(r"^(?=.*\d)[0-9A-Z]{5}$")

_SQLITE_VOCABULARY_RE = re.compile(r"\b(?:NOT NULL|UNIQUE|FOREIGN KEY|CHECK) constraint failed\b")

_MYSQL_MODULE_MARKERS = ("mysql", "mariadb", "asyncmy")
_MYSQL_SYMBOLIC_PREFIXES = ("ER_", "WARN_")

_SCALAR_TYPES = (str, bytes, int, float, bool)


@dataclass(frozen=True)
class ErrorShape:
    """
    Read-only snapshot of the fields a native error exposes.

    Built once by `inspect_error()`; detection and parsing only ever look at this snapshot,
    never at the native error itself.
    """

    sqlstate: str | None = None
    errno: int | None = None
    symbolic_code: str | None = None
    sqlite_errorname: str | None = None
    message: str = ""
    detail: str | None = None
    schema: str | None = None
    table: str | None = None
    column: str | None = None
    constraint: str | None = None
    driver_module: str = ""
    has_sql_message: bool = False

    @property
    def text(self) -> str:
        """Message and detail joined, for pattern matching."""
        if self.detail:
            return f"{self.message}\n{self.detail}"
        return self.message


def _read(source: Any, name: str) -> Any:
    if source is None:
        return None
    if isinstance(source, Mapping):
        try:
            return source.get(name)
        except Exception:
            return None
    try:
        return getattr(source, name, None)
    except Exception:
        # some driver objects compute attributes lazily and may fail on partial errors
        return None


def _first_str(sources: list[Any], *names: str) -> str | None:
    for source in sources:
        for name in names:
            value = _read(source, name)
            if isinstance(value, str) and value:
                return value
    return None


def _sqlstate_of(sources: list[Any]) -> str | None:
    for source in sources:
        for name in ("pgcode", "sqlstate", "code"):
            value = _read(source, name)
            if isinstance(value, str) and _SQLSTATE_RE.match(value.upper()):
                return value.upper()
    return None


def _errno_of(source: Any) -> int | None:
    value = _read(source, "errno")
    if isinstance(value, int) and not isinstance(value, bool):
        return value

    # PyMySQL / mysqlclient: args == (errno, message)
    args = _read(source, "args") if isinstance(source, BaseException) else None
    if isinstance(args, tuple) and len(args) >= 2 and isinstance(args[1], str):
        if isinstance(args[0], int) and not isinstance(args[0], bool):
            return args[0]
    return None


def _message_of(source: Any) -> str:
    # mysql-connector exposes `msg`; serialized driver payloads use `sqlMessage`
    for name in ("msg", "sqlMessage"):
        value = _read(source, name)
        if isinstance(value, str) and value:
            return value

    if isinstance(source, BaseException):
        args = source.args
        if len(args) >= 2 and isinstance(args[0], int) and isinstance(args[1], str):
            return args[1]
        try:
            return str(source)
        except Exception:
            return ""

    value = _read(source, "message")
    return value if isinstance(value, str) else ""


def inspect_error(candidate: Any) -> ErrorShape:
    """
    Snapshot the fields of a native error into an ErrorShape.

    - SQLAlchemy StatementError wrappers (IntegrityError, DataError, ...) are unwrapped to `.orig`.
    - Structured Postgres fields are read from the error, its `diag` object (psycopg / psycopg2)
      and its `__cause__` (asyncpg behind the SQLAlchemy adapter), first hit wins.
    - Scalars, None and objects without any known field produce an empty shape.
    """
    source = candidate
    if isinstance(candidate, StatementError) and candidate.orig is not None:
        source = candidate.orig

    if source is None or isinstance(source, _SCALAR_TYPES):
        return ErrorShape()

    cause = source.__cause__ if isinstance(source, BaseException) else None
    sources = [source, _read(source, "diag"), cause]

    modules = [type(s).__module__ for s in (source, cause) if s is not None and not isinstance(s, Mapping)]

    code = _read(source, "code")
    errorname = _read(source, "sqlite_errorname")

    return ErrorShape(
        sqlstate=_sqlstate_of([source, cause]),
        errno=_errno_of(source),
        symbolic_code=code if isinstance(code, str) and not _SQLSTATE_RE.match(code.upper()) else None,
        sqlite_errorname=errorname if isinstance(errorname, str) else None,
        message=_message_of(source),
        detail=_first_str(sources, "message_detail", "detail"),
        schema=_first_str(sources, "schema_name", "schema"),
        table=_first_str(sources, "table_name", "table"),
        column=_first_str(sources, "column_name", "column"),
        constraint=_first_str(sources, "constraint_name", "constraint"),
        driver_module=" ".join(modules),
        has_sql_message=isinstance(_read(source, "sqlMessage"), str),
    )


# =================================================================================================================
# Dialect detection
# =================================================================================================================

def _looks_like_postgres(shape: ErrorShape) -> bool:
    # mysql-connector also reports a SQLSTATE ("23000") next to its errno
    return shape.sqlstate is not None and shape.errno is None


def _looks_like_mysql(shape: ErrorShape) -> bool:
    if shape.errno is None:
        return False
    module = shape.driver_module.lower()
    if any(marker in module for marker in _MYSQL_MODULE_MARKERS):
        return True
    if shape.symbolic_code and shape.symbolic_code.startswith(_MYSQL_SYMBOLIC_PREFIXES):
        return True
    return shape.has_sql_message


def _looks_like_sqlite(shape: ErrorShape) -> bool:
    if shape.sqlite_errorname and shape.sqlite_errorname.startswith("SQLITE_CONSTRAINT"):
        return True
    return bool(_SQLITE_VOCABULARY_RE.search(shape.message))


_DETECTION_ORDER: tuple[tuple[Dialect, Callable[[ErrorShape], bool]], ...] = (
    (Dialect.POSTGRES, _looks_like_postgres),
    (Dialect.MYSQL, _looks_like_mysql),
    (Dialect.SQLITE, _looks_like_sqlite),
)


def detect_dialect(value: Any) -> Dialect:
    """
    Decide which engine family produced a native error (or an already built ErrorShape).

    Checks run in priority order: SQLSTATE code -> Postgres, errno + MySQL marker -> MySQL,
    SQLite constraint vocabulary -> SQLite. Returns Dialect.UNKNOWN otherwise; never raises.
    """
    try:
        shape = value if isinstance(value, ErrorShape) else inspect_error(value)
        for dialect, predicate in _DETECTION_ORDER:
            if predicate(shape):
                return dialect
    except Exception:
        logger.exception("Dialect detection failed", extra={"candidate_type": type(value).__name__})
    return Dialect.UNKNOWN


__all__ = ["Dialect", "ErrorShape", "inspect_error", "detect_dialect"]
