import logging
import re
from enum import Enum
from types import MappingProxyType

from ..base import ViolationKind
from ..detector import ErrorShape
from .common import IDENT, QUALIFIED, ParseResult, build_result, group, search_first, split_columns, split_qualified

logger = logging.getLogger(__name__)


# =================================================================================================================
# Postgres error code mapping
# =================================================================================================================

# https://www.postgresql.org/docs/current/errcodes-appendix.html
class PostgresErrorCodes(str, Enum):
    INTEGRITY_CONSTRAINT_VIOLATION = "23000"
    RESTRICT_VIOLATION = "23001"
    NOT_NULL_VIOLATION = "23502"
    FOREIGN_KEY_VIOLATION = "23503"
    UNIQUE_VIOLATION = "23505"
    CHECK_VIOLATION = "23514"
    EXCLUSION_VIOLATION = "23P01"


SQLSTATE_KIND_MAP = MappingProxyType({
    PostgresErrorCodes.NOT_NULL_VIOLATION.value: ViolationKind.NOT_NULL,
    PostgresErrorCodes.FOREIGN_KEY_VIOLATION.value: ViolationKind.FOREIGN_KEY,
    PostgresErrorCodes.UNIQUE_VIOLATION.value: ViolationKind.UNIQUE,
    PostgresErrorCodes.CHECK_VIOLATION.value: ViolationKind.CHECK,
    PostgresErrorCodes.INTEGRITY_CONSTRAINT_VIOLATION.value: ViolationKind.GENERIC_CONSTRAINT,
    PostgresErrorCodes.RESTRICT_VIOLATION.value: ViolationKind.GENERIC_CONSTRAINT,
    PostgresErrorCodes.EXCLUSION_VIOLATION.value: ViolationKind.GENERIC_CONSTRAINT,
})

INTEGRITY_CLASS = "23"
DATA_EXCEPTION_CLASS = "22"


def classify_sqlstate(sqlstate: str | None) -> ViolationKind:
    if not sqlstate:
        return ViolationKind.UNCLASSIFIED

    kind = SQLSTATE_KIND_MAP.get(sqlstate)
    if kind is not None:
        return kind

    if sqlstate.startswith(INTEGRITY_CLASS):
        logger.warning("Unknown Postgres integrity error code encountered", extra={"sqlstate": sqlstate})
        return ViolationKind.GENERIC_CONSTRAINT

    if sqlstate.startswith(DATA_EXCEPTION_CLASS):
        return ViolationKind.DATA

    return ViolationKind.UNCLASSIFIED


# =================================================================================================================
# Message patterns (used when the driver does not expose diagnostics)
# =================================================================================================================

_MESSAGE_PATTERNS = MappingProxyType({
    ViolationKind.NOT_NULL: (
        # 'null value in column "email" of relation "users" violates not-null constraint' (13+)
        # 'null value in column "email" violates not-null constraint'
        re.compile(
            rf"null value in column (?P<column>{IDENT})(?: of relation (?P<table>{QUALIFIED}))? "
            r"violates not-null constraint"
        ),
    ),
    ViolationKind.UNIQUE: (
        re.compile(rf"duplicate key value violates unique constraint (?P<constraint>{IDENT})"),
    ),
    ViolationKind.FOREIGN_KEY: (
        # the constraint belongs to the referencing table, reported last for deletes
        re.compile(
            rf"update or delete on table {QUALIFIED} violates foreign key constraint "
            rf"(?P<constraint>{IDENT}) on table (?P<table>{QUALIFIED})"
        ),
        re.compile(
            rf"insert or update on table (?P<table>{QUALIFIED}) violates foreign key constraint "
            rf"(?P<constraint>{IDENT})"
        ),
    ),
    ViolationKind.CHECK: (
        re.compile(rf"new row for relation (?P<table>{QUALIFIED}) violates check constraint (?P<constraint>{IDENT})"),
    ),
    ViolationKind.GENERIC_CONSTRAINT: (
        re.compile(rf"conflicting key value violates exclusion constraint (?P<constraint>{IDENT})"),
    ),
})

# DETAIL:  Key (email, username)=(a@b.com, u) already exists.
_KEY_DETAIL_RE = re.compile(r"Key \((?P<columns>[^)]*)\)=")

# Only the insert-side detail lists the referencing table's columns; on delete
# ('Key (id)=(1) is still referenced from table "child".') they belong to the parent.
_FK_KEY_DETAIL_RE = re.compile(r"Key \((?P<columns>[^)]*)\)=\(.*\) is not present in table", re.S)


def _relation(match: re.Match) -> tuple[str | None, str | None]:
    """(schema, table) from the raw `table` group of a match."""
    if "table" not in match.re.groupindex or not match.group("table"):
        return None, None
    parts = split_qualified(match.group("table"))
    if not parts:
        return None, None
    return (parts[-2] if len(parts) >= 2 else None), parts[-1]


def parse(shape: ErrorShape) -> ParseResult:
    """
    Classify a Postgres error by SQLSTATE and collect identifiers.

    Structured diagnostics (table_name, column_name, constraint_name, schema_name) win;
    the message text fills whatever the driver left out.
    """
    kind = classify_sqlstate(shape.sqlstate)
    if kind is ViolationKind.UNCLASSIFIED:
        return ParseResult.unclassified()

    schema, table, constraint = shape.schema, shape.table, shape.constraint
    columns: tuple[str, ...] = (shape.column,) if shape.column else ()

    match = search_first(_MESSAGE_PATTERNS.get(kind, ()), shape.text)
    if match:
        msg_schema, msg_table = _relation(match)
        schema = schema or msg_schema
        table = table or msg_table
        constraint = constraint or group(match, "constraint")
        if not columns and group(match, "column"):
            columns = (group(match, "column"),)

    if not columns and kind in (ViolationKind.UNIQUE, ViolationKind.FOREIGN_KEY, ViolationKind.GENERIC_CONSTRAINT):
        detail_re = _FK_KEY_DETAIL_RE if kind is ViolationKind.FOREIGN_KEY else _KEY_DETAIL_RE
        key = detail_re.search(shape.text)
        if key:
            columns = split_columns(key.group("columns"))

    logger.debug("Postgres error parsed", extra={"sqlstate": shape.sqlstate, "raw": shape.text})

    return build_result(kind, table=table, columns=columns, constraint=constraint, schema=schema)
