"""
Dialect parsers.

Each parser takes an ErrorShape already recognized as its dialect and returns a ParseResult.
A parser never raises; anything it cannot place yields `ParseResult.unclassified()`.
"""

from types import MappingProxyType
from typing import Callable

from ..detector import Dialect, ErrorShape
from . import mysql, postgres, sqlite
from .common import ParseResult

Parser = Callable[[ErrorShape], ParseResult]

PARSERS: "MappingProxyType[Dialect, Parser]" = MappingProxyType({
    Dialect.POSTGRES: postgres.parse,
    Dialect.MYSQL: mysql.parse,
    Dialect.SQLITE: sqlite.parse,
})


def get_parser(dialect: Dialect) -> Parser | None:
    return PARSERS.get(dialect)


__all__ = ["PARSERS", "Parser", "ParseResult", "get_parser"]
