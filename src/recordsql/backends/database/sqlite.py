"""SQLite database backend."""

import re
import sqlite3
import threading
from pathlib import Path
from typing import Any, Sequence

from recordsql.backends.database.base import BaseDatabase
from recordsql.protocols.database import ExecResult, Row

_MALFORMED_RE = re.compile(
    r"syntax error|incomplete input|no such (table|column)|has no column named"
    r"|values for \d+ columns|unrecognized token"
)


class _SQLiteTransaction:
    """Transaction holding the database lock until commit or rollback."""

    def __init__(self, conn: sqlite3.Connection, lock: threading.RLock) -> None:
        self._conn = conn
        self._lock = lock
        self._released = False

    def execute(self, query: str, params: Sequence[Any]) -> ExecResult:
        cursor = self._conn.execute(query, tuple(params))
        try:
            return ExecResult(
                last_insert_id=cursor.lastrowid or 0,
                rows_affected=cursor.rowcount,
            )
        finally:
            cursor.close()

    def commit(self) -> None:
        # On failure the transaction stays open for the caller to roll back
        self._conn.execute("COMMIT")
        self._release()

    def rollback(self) -> None:
        try:
            if self._conn.in_transaction:
                self._conn.execute("ROLLBACK")
        finally:
            self._release()

    def _release(self) -> None:
        if not self._released:
            self._released = True
            self._lock.release()


class SQLiteDatabase(BaseDatabase):
    """SQLite database backend.

    Suitable for development, tests and small deployments. One connection is
    shared by all callers and serialized with a lock.
    """

    name = "sqlite"
    driver_errors = (sqlite3.Error,)

    def __init__(
        self,
        path: str | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize SQLite database.

        Args:
            path: Path to SQLite database file. Defaults to ./data/recordsql.db
                  Use ":memory:" for in-memory database.
            **kwargs: Ignored (for compatibility with other backends)
        """
        if path == ":memory:":
            self.path: str | Path = ":memory:"
        else:
            self.path = Path(path) if path else Path("./data/recordsql.db")
            self.path.parent.mkdir(parents=True, exist_ok=True)

        super().__init__(target=str(self.path))
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.RLock()

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._conn is None:
            db_path = str(self.path) if isinstance(self.path, Path) else self.path
            # Transactions are opened explicitly with BEGIN
            self._conn = sqlite3.connect(
                db_path, check_same_thread=False, isolation_level=None
            )
        return self._conn

    def _ping(self) -> None:
        with self._lock:
            self._get_connection().execute("SELECT 1").fetchone()

    def _begin(self) -> _SQLiteTransaction:
        self._lock.acquire()
        try:
            conn = self._get_connection()
            conn.execute("BEGIN")
        except BaseException:
            self._lock.release()
            raise
        return _SQLiteTransaction(conn, self._lock)

    def _fetch(self, query: str, params: Sequence[Any]) -> list[Row]:
        with self._lock:
            cursor = self._get_connection().execute(query, tuple(params))
            try:
                names = [d[0] for d in cursor.description or ()]
                return [Row(_data=dict(zip(names, row))) for row in cursor.fetchall()]
            finally:
                cursor.close()

    def is_malformed(self, error: BaseException) -> bool:
        if isinstance(error, sqlite3.ProgrammingError):
            return True
        return isinstance(error, sqlite3.OperationalError) and bool(
            _MALFORMED_RE.search(str(error))
        )

    def execute_script(self, script: str) -> None:
        """Run a multi-statement script, e.g. to create tables for tests."""
        self.ensure_usable()
        with self._lock:
            self._get_connection().executescript(script)

    def _close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
