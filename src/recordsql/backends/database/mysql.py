"""MySQL database backend.

Connections come from a SQLAlchemy ``QueuePool`` and talk to the server
through PyMySQL. Only the pool and the raw DB-API connections are used;
statements are plain SQL text.
"""

from typing import Any, Sequence

import pymysql
from pymysql.constants import ER
from sqlalchemy import create_engine
from sqlalchemy.engine import URL
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from recordsql.backends.database.base import BaseDatabase
from recordsql.config import CHARSET
from recordsql.protocols.database import ExecResult, Row
from recordsql.utils.placeholders import to_format_paramstyle

# Server errors that reject the statement text itself. PyMySQL raises some of
# these as OperationalError or InternalError rather than ProgrammingError.
MALFORMED_CODES = frozenset({
    ER.PARSE_ERROR,
    ER.SYNTAX_ERROR,
    ER.BAD_FIELD_ERROR,
    ER.NO_SUCH_TABLE,
    ER.BAD_TABLE_ERROR,
    ER.WRONG_VALUE_COUNT_ON_ROW,
    ER.FIELD_SPECIFIED_TWICE,
})


class _MySQLTransaction:
    """Transaction on one pooled connection, returned to the pool on finish."""

    def __init__(self, raw: Any) -> None:
        self._raw = raw

    def execute(self, query: str, params: Sequence[Any]) -> ExecResult:
        cursor = self._raw.cursor()
        try:
            cursor.execute(query, tuple(params))
            return ExecResult(
                last_insert_id=cursor.lastrowid or 0,
                rows_affected=cursor.rowcount,
            )
        finally:
            cursor.close()

    def commit(self) -> None:
        # On failure the connection stays checked out for the caller to roll back
        self._raw.commit()
        self._raw.close()

    def rollback(self) -> None:
        try:
            self._raw.rollback()
        finally:
            self._raw.close()


class MySQLDatabase(BaseDatabase):
    """MySQL database backend with a bounded connection pool."""

    name = "mysql"
    driver_errors = (pymysql.err.Error, SQLAlchemyError)

    def __init__(
        self,
        user: str = "root",
        password: str = "",
        host: str = "127.0.0.1",
        port: int = 3306,
        database: str = "",
        charset: str = CHARSET,
        max_conn_lifetime: int = 100,
        max_idle_conns: int = 2,
        max_open_conns: int = 5,
        **kwargs: Any,
    ) -> None:
        """Initialize MySQL database.

        Args:
            user: Account name
            password: Account password
            host: Server host
            port: Server port
            database: Schema to use
            charset: Connection character set
            max_conn_lifetime: Seconds before a pooled connection is recycled
            max_idle_conns: Connections kept open in the pool
            max_open_conns: Upper bound on simultaneously open connections
            **kwargs: Ignored (for compatibility with other backends)
        """
        self.url = URL.create(
            "mysql+pymysql",
            username=user,
            password=password,
            host=host,
            port=port,
            database=database or None,
            query={"charset": charset},
        )
        super().__init__(target=self.url.render_as_string(hide_password=True))
        self.engine = create_engine(
            self.url,
            pool_size=max_idle_conns,
            max_overflow=max(max_open_conns - max_idle_conns, 0),
            pool_recycle=max_conn_lifetime,
        )

    def _native(self, query: str) -> str:
        return to_format_paramstyle(query)

    def _ping(self) -> None:
        with self.engine.connect() as conn:
            conn.exec_driver_sql("SELECT 1")

    def _begin(self) -> _MySQLTransaction:
        raw = self.engine.raw_connection()
        try:
            cursor = raw.cursor()
            try:
                cursor.execute("START TRANSACTION")
            finally:
                cursor.close()
        except BaseException:
            raw.close()
            raise
        return _MySQLTransaction(raw)

    def _fetch(self, query: str, params: Sequence[Any]) -> list[Row]:
        raw = self.engine.raw_connection()
        try:
            cursor = raw.cursor()
            try:
                cursor.execute(query, tuple(params))
                names = [d[0] for d in cursor.description or ()]
                return [Row(_data=dict(zip(names, row))) for row in cursor.fetchall()]
            finally:
                cursor.close()
        finally:
            raw.close()

    def is_malformed(self, error: BaseException) -> bool:
        if isinstance(error, DBAPIError):
            error = error.orig
        if isinstance(error, pymysql.err.ProgrammingError):
            return True
        return (
            isinstance(error, pymysql.err.MySQLError)
            and bool(error.args)
            and error.args[0] in MALFORMED_CODES
        )

    def _close(self) -> None:
        self.engine.dispose()
