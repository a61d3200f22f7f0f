"""
Building blocks shared by the dialect parsers: the parse result, identifier handling and
constraint-name decomposition.
"""

import re
from dataclasses import dataclass
from typing import Iterable

from ..base import ViolationKind


@dataclass(frozen=True)
class ParseResult:
    kind: ViolationKind
    table: str | None = None
    column: str | None = None
    columns: tuple[str, ...] = ()
    constraint: str | None = None
    schema: str | None = None

    @classmethod
    def unclassified(cls) -> "ParseResult":
        return cls(ViolationKind.UNCLASSIFIED)

    @property
    def is_classified(self) -> bool:
        return self.kind is not ViolationKind.UNCLASSIFIED


# =================================================================================================================
# Identifiers
# =================================================================================================================

# One identifier token: `backticked`, "double quoted", 'single quoted' or bare (snake_case, camelCase, $).
IDENT = r"(?:`[^`]+`|\"[^\"]+\"|'[^']+'|[\w$]+)"

# Dotted name made of identifier tokens: `db`.`table`, "public"."users", main.t
QUALIFIED = rf"{IDENT}(?:\.{IDENT})*"

_IDENT_RE = re.compile(IDENT)
_PLAIN_IDENT_RE = re.compile(r"[A-Za-z_][\w$]*")
_QUOTES = "`\"'"


def unquote(token: str) -> str:
    """Strip one pair of matching quotes; the name itself is returned verbatim (no case change)."""
    token = token.strip()
    if len(token) >= 2 and token[0] == token[-1] and token[0] in _QUOTES:
        return token[1:-1]
    return token


def split_qualified(name: str) -> list[str]:
    """
    Split a dotted name into its parts.

    'users.email' -> ['users', 'email'];  '`db`.`child`' -> ['db', 'child']
    """
    return [unquote(part) for part in _IDENT_RE.findall(name)]


def split_columns(text: str) -> tuple[str, ...]:
    """
    Split a column list such as 'email, username' or '`parent_id`'.

    Returns an empty tuple when any entry is an expression (e.g. 'lower(email::text)')
    so callers never report a guessed column.
    """
    columns = []
    for part in text.split(","):
        part = part.strip()
        if len(part) >= 2 and part[0] == part[-1] and part[0] in _QUOTES:
            columns.append(part[1:-1])
        elif _PLAIN_IDENT_RE.fullmatch(part):
            columns.append(part)
        else:
            return ()
    return tuple(columns)


def search_first(patterns: Iterable[re.Pattern], text: str) -> re.Match | None:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match
    return None


def group(match: re.Match, name: str) -> str | None:
    """Unquoted value of a named group, None when the group did not take part in the match."""
    if name not in match.re.groupindex:
        return None
    value = match.group(name)
    return unquote(value) if value else None


# =================================================================================================================
# Constraint-name decomposition
# =================================================================================================================

# {table}_{column}_{suffix}: Postgres defaults (key, fkey, check, not_null) and the
# unique/foreign names generated by common migration tools. Longest suffixes first.
CONSTRAINT_SUFFIXES = ("not_null", "foreign", "unique", "check", "fkey", "key")

# These name every column of the key joined with "_": users_first_name_key is either
# (first_name) or (first, name).
MULTI_COLUMN_SUFFIXES = frozenset({"foreign", "unique", "fkey", "key"})

# {prefix}_{table}_{column}: SQLAlchemy naming convention for unique constraints.
CONSTRAINT_PREFIXES = ("uq",)

# Postgres truncates identifiers to NAMEDATALEN - 1 bytes.
POSTGRES_MAX_IDENTIFIER_LENGTH = 63


def decompose_constraint(constraint: str | None, table: str | None) -> str | None:
    """
    Derive the column from a constraint name following a fixed naming convention.

    'users_email_key' with table 'users' -> 'email'
    'theTable_not_nullable_not_null' with table 'theTable' -> 'not_nullable'
    'uq_users_email' with table 'users' -> 'email'

    Returns None when the table is unknown, the name does not follow a known convention,
    the name may have been truncated, or a multi-column suffix (key, fkey, unique, foreign)
    leaves an underscored remainder that could be several columns.
    """
    if not constraint or not table:
        return None
    if len(constraint) >= POSTGRES_MAX_IDENTIFIER_LENGTH:
        return None

    head = f"{table}_"
    if constraint.startswith(head):
        rest = constraint[len(head):]
        for suffix in CONSTRAINT_SUFFIXES:
            tail = f"_{suffix}"
            if rest.endswith(tail) and len(rest) > len(tail):
                column = rest[: -len(tail)]
                if suffix in MULTI_COLUMN_SUFFIXES and "_" in column:
                    return None
                return column
        return None

    for prefix in CONSTRAINT_PREFIXES:
        lead = f"{prefix}_{table}_"
        if constraint.startswith(lead) and len(constraint) > len(lead):
            return constraint[len(lead):]
    return None


def build_result(
    kind: ViolationKind,
    *,
    table: str | None = None,
    columns: Iterable[str] = (),
    constraint: str | None = None,
    schema: str | None = None,
) -> ParseResult:
    """Assemble a ParseResult, falling back to constraint decomposition for the column."""
    cols = tuple(c for c in columns if c)
    if not cols and constraint and kind.is_constraint:
        derived = decompose_constraint(constraint, table)
        if derived:
            cols = (derived,)
    return ParseResult(
        kind,
        table=table,
        column=cols[0] if len(cols) == 1 else None,
        columns=cols,
        constraint=constraint,
        schema=schema,
    )
