import logging
import re
from types import MappingProxyType

from ..base import ViolationKind
from ..detector import ErrorShape
from .common import IDENT, ParseResult, build_result, group, unquote

logger = logging.getLogger(__name__)


# =================================================================================================================
# Extended result codes (sqlite3.Error.sqlite_errorname, Python 3.11+)
# =================================================================================================================

# https://www.sqlite.org/rescode.html#extrc
ERRORNAME_KIND_MAP = MappingProxyType({
    "SQLITE_CONSTRAINT_NOTNULL": ViolationKind.NOT_NULL,
    "SQLITE_CONSTRAINT_UNIQUE": ViolationKind.UNIQUE,
    "SQLITE_CONSTRAINT_PRIMARYKEY": ViolationKind.UNIQUE,
    "SQLITE_CONSTRAINT_FOREIGNKEY": ViolationKind.FOREIGN_KEY,
    "SQLITE_CONSTRAINT_CHECK": ViolationKind.CHECK,
    "SQLITE_CONSTRAINT_DATATYPE": ViolationKind.DATA,
})

CONSTRAINT_ERRORNAME_PREFIX = "SQLITE_CONSTRAINT"


def classify_errorname(errorname: str | None) -> ViolationKind:
    if not errorname:
        return ViolationKind.UNCLASSIFIED
    kind = ERRORNAME_KIND_MAP.get(errorname)
    if kind is not None:
        return kind
    if errorname.startswith(CONSTRAINT_ERRORNAME_PREFIX):
        return ViolationKind.GENERIC_CONSTRAINT
    return ViolationKind.UNCLASSIFIED


# =================================================================================================================
# Message vocabulary
# =================================================================================================================

# SQLite reports identifiers unquoted, as written in the schema: theTable.notNullableString
_VOCABULARY: tuple[tuple[ViolationKind, re.Pattern], ...] = (
    (ViolationKind.NOT_NULL, re.compile(r"NOT NULL constraint failed: (?P<targets>[^\n]+)")),
    (ViolationKind.UNIQUE, re.compile(rf"UNIQUE constraint failed: index (?P<constraint>{IDENT})")),
    (ViolationKind.UNIQUE, re.compile(r"UNIQUE constraint failed: (?P<targets>[^\n]+)")),
    (ViolationKind.FOREIGN_KEY, re.compile(r"FOREIGN KEY constraint failed")),
    (ViolationKind.CHECK, re.compile(r"CHECK constraint failed(?:: (?P<check>[^\n]+))?")),
    # STRICT tables
    (ViolationKind.DATA, re.compile(r"cannot store \w+ value in \w+ column (?P<targets>[^\n]+)")),
)

_PLAIN_NAME_RE = re.compile(r"[A-Za-z_][\w$]*")


def _split_targets(text: str) -> tuple[str | None, tuple[str, ...]]:
    """'users.email, users.name' -> ('users', ('email', 'name'))"""
    table = None
    columns = []
    for target in text.split(","):
        owner, _, column = target.strip().rpartition(".")
        if not column:
            continue
        table = table or (unquote(owner) if owner else None)
        columns.append(unquote(column))
    return table, tuple(columns)


def _match_vocabulary(message: str) -> tuple[ViolationKind, re.Match | None]:
    for kind, pattern in _VOCABULARY:
        match = pattern.search(message)
        if match:
            return kind, match
    return ViolationKind.UNCLASSIFIED, None


def parse(shape: ErrorShape) -> ParseResult:
    """
    Classify a SQLite constraint error.

    The extended result code decides the kind when the driver exposes it; otherwise the fixed
    message vocabulary does. Table and column come from the 'table.column' part of the message.
    """
    code_kind = classify_errorname(shape.sqlite_errorname)
    message_kind, match = _match_vocabulary(shape.message)

    kind = code_kind if code_kind is not ViolationKind.UNCLASSIFIED else message_kind
    if kind is ViolationKind.UNCLASSIFIED:
        return ParseResult.unclassified()

    table = constraint = None
    columns: tuple[str, ...] = ()

    # only trust message fields describing the same violation as the result code
    if match is not None and (message_kind is kind or kind is ViolationKind.GENERIC_CONSTRAINT):
        kind = message_kind
        if "targets" in match.re.groupindex and match.group("targets"):
            table, columns = _split_targets(match.group("targets"))
        constraint = group(match, "constraint")
        check = group(match, "check")
        # newer SQLite reports the constraint name, older/unnamed ones the expression
        if check and _PLAIN_NAME_RE.fullmatch(check):
            constraint = check

    logger.debug("SQLite error parsed", extra={"sqlite_errorname": shape.sqlite_errorname, "raw": shape.message})

    return build_result(kind, table=table, columns=columns, constraint=constraint)
