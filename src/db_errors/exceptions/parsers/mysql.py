import logging
import re
from enum import IntEnum
from types import MappingProxyType

from ..base import ViolationKind
from ..detector import ErrorShape
from .common import IDENT, QUALIFIED, ParseResult, build_result, group, search_first, split_columns, split_qualified

logger = logging.getLogger(__name__)


# =================================================================================================================
# MySQL / MariaDB error number mapping
# =================================================================================================================

# https://dev.mysql.com/doc/mysql-errors/8.0/en/server-error-reference.html
class MySQLErrorCodes(IntEnum):
    ER_DUP_KEY = 1022
    ER_BAD_NULL_ERROR = 1048
    ER_DUP_ENTRY = 1062
    ER_DUP_UNIQUE = 1169
    ER_NO_REFERENCED_ROW = 1216
    ER_ROW_IS_REFERENCED = 1217
    ER_WARN_DATA_OUT_OF_RANGE = 1264
    WARN_DATA_TRUNCATED = 1265
    ER_TRUNCATED_WRONG_VALUE = 1292
    ER_NO_DEFAULT_FOR_FIELD = 1364
    ER_TRUNCATED_WRONG_VALUE_FOR_FIELD = 1366
    ER_DATA_TOO_LONG = 1406
    ER_ROW_IS_REFERENCED_2 = 1451
    ER_NO_REFERENCED_ROW_2 = 1452
    ER_DUP_ENTRY_WITH_KEY_NAME = 1586
    ER_CHECK_CONSTRAINT_VIOLATED = 3819
    ER_CONSTRAINT_FAILED = 4025  # MariaDB


ERRNO_KIND_MAP = MappingProxyType({
    MySQLErrorCodes.ER_BAD_NULL_ERROR: ViolationKind.NOT_NULL,
    MySQLErrorCodes.ER_NO_DEFAULT_FOR_FIELD: ViolationKind.NOT_NULL,
    MySQLErrorCodes.ER_DUP_KEY: ViolationKind.UNIQUE,
    MySQLErrorCodes.ER_DUP_ENTRY: ViolationKind.UNIQUE,
    MySQLErrorCodes.ER_DUP_UNIQUE: ViolationKind.UNIQUE,
    MySQLErrorCodes.ER_DUP_ENTRY_WITH_KEY_NAME: ViolationKind.UNIQUE,
    MySQLErrorCodes.ER_NO_REFERENCED_ROW: ViolationKind.FOREIGN_KEY,
    MySQLErrorCodes.ER_ROW_IS_REFERENCED: ViolationKind.FOREIGN_KEY,
    MySQLErrorCodes.ER_ROW_IS_REFERENCED_2: ViolationKind.FOREIGN_KEY,
    MySQLErrorCodes.ER_NO_REFERENCED_ROW_2: ViolationKind.FOREIGN_KEY,
    MySQLErrorCodes.ER_CHECK_CONSTRAINT_VIOLATED: ViolationKind.CHECK,
    MySQLErrorCodes.ER_CONSTRAINT_FAILED: ViolationKind.CHECK,
    MySQLErrorCodes.ER_WARN_DATA_OUT_OF_RANGE: ViolationKind.DATA,
    MySQLErrorCodes.WARN_DATA_TRUNCATED: ViolationKind.DATA,
    MySQLErrorCodes.ER_TRUNCATED_WRONG_VALUE: ViolationKind.DATA,
    MySQLErrorCodes.ER_TRUNCATED_WRONG_VALUE_FOR_FIELD: ViolationKind.DATA,
    MySQLErrorCodes.ER_DATA_TOO_LONG: ViolationKind.DATA,
})


def classify_errno(errno: int | None) -> ViolationKind:
    if errno is None:
        return ViolationKind.UNCLASSIFIED
    return ERRNO_KIND_MAP.get(errno, ViolationKind.UNCLASSIFIED)


# =================================================================================================================
# Message patterns
# =================================================================================================================

_MESSAGE_PATTERNS = MappingProxyType({
    ViolationKind.NOT_NULL: (
        re.compile(rf"Column (?P<column>{IDENT}) cannot be null"),
        re.compile(rf"Field (?P<column>{IDENT}) doesn't have a default value"),
    ),
    ViolationKind.UNIQUE: (
        # MySQL 8 qualifies the key with its table: for key 'users.users_email_unique'
        re.compile(rf"Duplicate entry '.*' for key (?P<key>{IDENT})", re.S),
        re.compile(rf"duplicate key in table (?P<table>{QUALIFIED})"),
        re.compile(rf"because of unique constraint, to table (?P<table>{QUALIFIED})"),
    ),
    ViolationKind.FOREIGN_KEY: (
        # a foreign key constraint fails (`db`.`child`, CONSTRAINT `child_parent_id_foreign`
        #   FOREIGN KEY (`parent_id`) REFERENCES `parent` (`id`))
        re.compile(
            rf"a foreign key constraint fails \((?P<table>{QUALIFIED}), CONSTRAINT (?P<constraint>{IDENT}) "
            r"FOREIGN KEY \((?P<columns>[^)]*)\)"
        ),
    ),
    ViolationKind.CHECK: (
        re.compile(rf"Check constraint (?P<constraint>{IDENT}) is violated"),
        re.compile(rf"CONSTRAINT (?P<constraint>{IDENT}) failed for (?P<table>{QUALIFIED})"),
    ),
    ViolationKind.DATA: (
        re.compile(rf"for column (?P<column>{IDENT}) at row \d+"),
    ),
})


def _split_key(key: str) -> tuple[str | None, str]:
    """'users.users_email_unique' -> ('users', 'users_email_unique'); 'email' -> (None, 'email')"""
    parts = split_qualified(key)
    if len(parts) >= 2:
        return parts[-2], parts[-1]
    return None, key


def parse(shape: ErrorShape) -> ParseResult:
    """
    Classify a MySQL / MariaDB error by its error number and pull identifiers out of the message.

    MySQL never reports identifiers as structured fields, so everything except the kind comes
    from the message text.
    """
    kind = classify_errno(shape.errno)
    if kind is ViolationKind.UNCLASSIFIED:
        return ParseResult.unclassified()

    schema = table = constraint = None
    columns: tuple[str, ...] = ()

    match = search_first(_MESSAGE_PATTERNS.get(kind, ()), shape.message)
    if match:
        raw_table = match.group("table") if "table" in match.re.groupindex else None
        if raw_table:
            parts = split_qualified(raw_table)
            table = parts[-1] if parts else None
            schema = parts[-2] if len(parts) >= 2 else None

        key = group(match, "key")
        if key:
            table, constraint = _split_key(key)
        else:
            constraint = group(match, "constraint")

        if group(match, "column"):
            columns = (group(match, "column"),)
        elif "columns" in match.re.groupindex and match.group("columns"):
            columns = split_columns(match.group("columns"))

    logger.debug("MySQL error parsed", extra={"errno": shape.errno, "raw": shape.message})

    return build_result(kind, table=table, columns=columns, constraint=constraint, schema=schema)
