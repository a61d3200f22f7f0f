import logging
from contextlib import contextmanager
from typing import Any, Iterator

from .base import DBError, ViolationKind
from .detector import Dialect, detect_dialect, inspect_error
from .parsers import get_parser

logger = logging.getLogger(__name__)


# -----------------------
# Normalization entry point
# -----------------------

def wrap_error(candidate: Any) -> Any:
    """
    Normalize a native database error into a DBError.

    Returns:
        - `candidate` itself when it already is a DBError (idempotent)
        - a new DBError when the dialect is recognized and the violation classified
        - `candidate` unchanged in every other case (unknown engine, unclassified code,
          values that are not errors at all)

    Never raises.
    """
    if isinstance(candidate, DBError):
        return candidate

    try:
        shape = inspect_error(candidate)
        dialect = detect_dialect(shape)

        if dialect is Dialect.UNKNOWN:
            logger.debug("db_errors.passthrough", extra={"candidate_type": type(candidate).__name__})
            return candidate

        parser = get_parser(dialect)
        result = parser(shape) if parser else None

        if result is None or result.kind is ViolationKind.UNCLASSIFIED:
            logger.debug(
                "db_errors.unclassified",
                extra={"dialect": dialect.value, "sqlstate": shape.sqlstate, "errno": shape.errno},
            )
            return candidate

        wrapped = DBError(
            result.kind,
            native_error=candidate,
            dialect=dialect,
            table=result.table,
            column=result.column,
            columns=result.columns,
            constraint=result.constraint,
            schema=result.schema,
        )
    except Exception:
        # Classification bugs must not replace the caller's original error.
        logger.exception("db_errors.wrap_failed", extra={"candidate_type": type(candidate).__name__})
        return candidate

    logger.debug(
        "db_errors.classified",
        extra={
            "dialect": dialect.value,
            "kind": wrapped.kind.value,
            "table": wrapped.table,
            "column": wrapped.column,
            "constraint": wrapped.constraint,
        },
    )
    return wrapped


# -----------------------
# Context manager to DRY error translation at call sites
# -----------------------

@contextmanager
def translate_errors(context: str | None = None) -> Iterator[None]:
    """
    Usage:
        with translate_errors("users.create"):
            session.execute(insert(users).values(...))
            session.flush()

    Any exception raised inside the block that `wrap_error` can classify is re-raised as the
    DBError, chained to the native error (`raise ... from exc`). Everything else propagates
    unchanged. Works inside coroutines as well:

        with translate_errors():
            await conn.execute(...)
    """
    try:
        yield
    except DBError:
        raise
    except Exception as exc:
        wrapped = wrap_error(exc)
        if wrapped is exc:
            raise

        # Expected client-level scenario (bad input), not a server fault.
        logger.info(
            "db_errors.translated",
            extra={
                "context": context,
                "dialect": wrapped.dialect.value,
                "kind": wrapped.kind.value,
                "table": wrapped.table,
                "column": wrapped.column,
                "constraint": wrapped.constraint,
            },
        )
        raise wrapped from exc


__all__ = ["wrap_error", "translate_errors"]
