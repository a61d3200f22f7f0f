import logging
import sqlite3

import pytest
from sqlalchemy.exc import IntegrityError

from db_errors.exceptions import mapper
from db_errors.exceptions.base import DBError, ViolationKind, is_constraint_violation, is_not_null_violation
from db_errors.exceptions.detector import Dialect
from db_errors.exceptions.mapper import translate_errors, wrap_error
from db_errors.tests.test_fixtures.native_errors import asyncpg_behind_sqlalchemy, mysql_error, pg_error


class TestWrapError:

    def test_classified_error_becomes_db_error(self):
        native = pg_error(
            'null value in column "not_nullable" of relation "theTable" violates not-null constraint',
            pgcode="23502",
        )

        wrapped = wrap_error(native)

        assert isinstance(wrapped, DBError)
        assert wrapped.kind is ViolationKind.NOT_NULL
        assert wrapped.dialect is Dialect.POSTGRES
        assert wrapped.native_error is native
        assert wrapped.table == "theTable"
        assert wrapped.column == "not_nullable"

    def test_sqlalchemy_wrapper_keeps_the_wrapper_as_native_error(self):
        orig = pg_error(pgcode="23505", table="users", constraint="users_email_key")
        sa_error = IntegrityError("INSERT ...", params={}, orig=orig)

        wrapped = wrap_error(sa_error)

        assert wrapped.native_error is sa_error
        assert wrapped.column == "email"

    def test_asyncpg_through_sqlalchemy_adapter(self):
        native = asyncpg_behind_sqlalchemy(
            "null value in column", sqlstate="23502", table="theTable", column="notNullableString",
        )

        wrapped = wrap_error(IntegrityError("UPDATE ...", params={}, orig=native))

        assert is_not_null_violation(wrapped)
        assert wrapped.column == "notNullableString"

    def test_is_idempotent(self):
        wrapped = wrap_error(mysql_error(1048, "Column 'not_nullable' cannot be null"))

        assert isinstance(wrapped, DBError)
        assert wrap_error(wrapped) is wrapped

    @pytest.mark.parametrize("value", [
        None, "NOT NULL constraint failed: t.c", 23502, {"kind": "not_null"}, object(),
    ])
    def test_non_errors_are_returned_unchanged(self, value):
        assert wrap_error(value) is value

    def test_unknown_engine_error_is_returned_unchanged(self):
        err = ConnectionResetError("connection reset by peer")
        assert wrap_error(err) is err

    def test_unclassified_dialect_error_is_returned_unchanged(self, caplog):
        err = pg_error('relation "missing" does not exist', pgcode="42P01")

        with caplog.at_level(logging.DEBUG, logger="db_errors"):
            assert wrap_error(err) is err

        assert any(r.getMessage() == "db_errors.unclassified" for r in caplog.records)

    def test_parser_failure_returns_original(self, monkeypatch, caplog):
        """
        Behavior:
                - A bug inside a parser is logged and the native error is handed back untouched.

        Importance:
                - Callers run wrap_error inside their own error handling; it must never replace
                  their exception with a new one.
        """
        def broken_parser(shape):
            raise RuntimeError("parser bug")

        monkeypatch.setattr(mapper, "get_parser", lambda dialect: broken_parser)
        err = pg_error(pgcode="23502")

        with caplog.at_level(logging.ERROR, logger="db_errors"):
            assert wrap_error(err) is err

        assert any(r.getMessage() == "db_errors.wrap_failed" for r in caplog.records)

    def test_classification_is_logged_without_raw_text(self, caplog):
        native = sqlite3.IntegrityError("UNIQUE constraint failed: users.email")

        with caplog.at_level(logging.DEBUG, logger="db_errors"):
            wrapped = wrap_error(native)

        record = next(r for r in caplog.records if r.getMessage() == "db_errors.classified")
        assert record.kind == "unique"
        assert record.column == wrapped.column == "email"
        assert not any("UNIQUE constraint failed" in str(value) for value in vars(record).values())


class TestTranslateErrors:

    def test_raises_db_error_chained_to_native(self):
        native = sqlite3.IntegrityError("NOT NULL constraint failed: theTable.not_nullable")

        with pytest.raises(DBError) as exc_info:
            with translate_errors("theTable.insert"):
                raise native

        assert is_constraint_violation(exc_info.value)
        assert exc_info.value.__cause__ is native
        assert exc_info.value.native_error is native

    def test_unrelated_errors_propagate_unchanged(self):
        with pytest.raises(KeyError):
            with translate_errors():
                raise KeyError("missing")

    def test_db_error_is_not_wrapped_twice(self):
        original = wrap_error(sqlite3.IntegrityError("FOREIGN KEY constraint failed"))

        with pytest.raises(DBError) as exc_info:
            with translate_errors():
                raise original

        assert exc_info.value is original

    def test_no_exception_is_a_no_op(self):
        with translate_errors():
            value = 1
        assert value == 1

    def test_translation_is_logged_with_context(self, caplog):
        with caplog.at_level(logging.INFO, logger="db_errors"):
            with pytest.raises(DBError):
                with translate_errors("users.create"):
                    raise mysql_error(1062, "Duplicate entry 'a' for key 'users.users_email_unique'")

        record = next(r for r in caplog.records if r.getMessage() == "db_errors.translated")
        assert record.context == "users.create"
        assert record.dialect == "mysql"
        assert record.constraint == "users_email_unique"
