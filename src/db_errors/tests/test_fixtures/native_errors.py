"""
Stand-ins for driver exceptions.

They reproduce only the *shape* each driver exposes (attribute names, args layout, module name),
which is all the detector and parsers look at. Real drivers are not needed to run the suite.
"""

from types import SimpleNamespace


class FakePsycopgError(Exception):
    """psycopg2 / psycopg: `pgcode` (psycopg2) or `sqlstate` (psycopg 3) plus a `diag` object."""

    __module__ = "psycopg2.errors"

    def __init__(self, message: str, *, pgcode: str, table=None, column=None, constraint=None,
                 schema=None, detail=None):
        super().__init__(message)
        self.pgcode = pgcode
        self.diag = SimpleNamespace(
            table_name=table,
            column_name=column,
            constraint_name=constraint,
            schema_name=schema,
            message_detail=detail,
        )


class FakeAsyncpgError(Exception):
    """asyncpg: `sqlstate` plus flat `table_name` / `column_name` / ... attributes."""

    __module__ = "asyncpg.exceptions"

    def __init__(self, message: str, *, sqlstate: str, table=None, column=None, constraint=None,
                 schema=None, detail=None):
        super().__init__(message)
        self.sqlstate = sqlstate
        self.table_name = table
        self.column_name = column
        self.constraint_name = constraint
        self.schema_name = schema
        self.detail = detail


class FakeAdaptedDBAPIError(Exception):
    """SQLAlchemy's asyncpg adapter: DBAPI-style error carrying `pgcode`, asyncpg error as __cause__."""

    __module__ = "sqlalchemy.dialects.postgresql.asyncpg"


class FakePyMySQLError(Exception):
    """PyMySQL / mysqlclient: args == (errno, message)."""

    __module__ = "pymysql.err"


class FakeAsyncmyError(Exception):
    """asyncmy: args == (errno, message), exceptions defined in `asyncmy.errors`."""

    __module__ = "asyncmy.errors"


class FakeMySQLConnectorError(Exception):
    """mysql-connector: `errno`, `msg` and a generic SQLSTATE."""

    __module__ = "mysql.connector.errors"

    def __init__(self, errno: int, msg: str, sqlstate: str = "23000"):
        super().__init__(f"{errno} ({sqlstate}): {msg}")
        self.errno = errno
        self.msg = msg
        self.sqlstate = sqlstate


def pg_error(message: str = "", *, pgcode: str, **diag) -> FakePsycopgError:
    return FakePsycopgError(message, pgcode=pgcode, **diag)


def mysql_error(errno: int, message: str) -> FakePyMySQLError:
    return FakePyMySQLError(errno, message)


def asyncpg_behind_sqlalchemy(message: str, *, sqlstate: str, **fields) -> FakeAdaptedDBAPIError:
    adapted = FakeAdaptedDBAPIError(message)
    adapted.pgcode = sqlstate
    adapted.__cause__ = FakeAsyncpgError(message, sqlstate=sqlstate, **fields)
    return adapted
