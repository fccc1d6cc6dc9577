"""Insert, update, delete and query records on one database handle.

Example:
    with Session.open(Config.from_file("recordsql.yaml")) as session:
        task = Task(0, "test", "url", 33, True, int(time.time()))
        task.id = session.insert(task).unwrap()

        task.url = "new url"
        session.update(task)

        found = session.query().select(Task).where("name", "test").get_one()
        session.delete(found)
"""

from dataclasses import dataclass
from typing import Any, Callable

from recordsql.config import Config
from recordsql.connection import connect
from recordsql.exceptions import RecordSQLError
from recordsql.executor import execute
from recordsql.observability import configure_logging, get_logger
from recordsql.protocols.database import Database, ExecResult
from recordsql.query import QueryBuilder
from recordsql.sql import QuotingPolicy, Statement, build_delete, build_insert, build_update

logger = get_logger(__name__)

INSERT_FAILED = -1
UPDATE_FAILED = 0
DELETE_FAILED = 0


@dataclass(frozen=True)
class Outcome:
    """Result of a write: a value on success, the error on failure.

    A failed outcome still carries the sentinel ``value`` (-1 for inserts,
    0 for updates and deletes), but ``ok`` and ``error`` tell it apart from
    a write that legitimately affected zero rows.
    """

    value: int
    error: RecordSQLError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> int:
        """Return the value, raising the carried error if the write failed."""
        if self.error is not None:
            raise self.error
        return self.value


class Session:
    """Record-level access to one database handle."""

    def __init__(
        self,
        db: Database,
        quoting: QuotingPolicy = QuotingPolicy.LEGACY,
    ) -> None:
        self.db = db
        self.quoting = quoting

    @classmethod
    def open(
        cls,
        config: Config,
        *,
        strict: bool = False,
        configure_logs: bool = False,
    ) -> "Session":
        """Connect using ``config`` and return a session on the new handle.

        Logging set up by the host application is left alone unless
        ``configure_logs`` is set, in which case ``config.logging`` replaces
        the handlers on the ``recordsql`` logger.
        """
        if configure_logs:
            configure_logging(config.logging.level, config.logging.format)
        return cls(connect(config, strict=strict), quoting=config.quoting)

    def _write(
        self,
        action: str,
        build: Callable[[Any, QuotingPolicy], Statement],
        record: Any,
        pick: Callable[[ExecResult], int],
        sentinel: int,
    ) -> Outcome:
        try:
            stmt = build(record, self.quoting)
            logger.debug(stmt.text, context={"action": action})
            result = execute(self.db, stmt.text, stmt.values)
        except RecordSQLError as e:
            logger.error(f"{action} failed", context={"record": type(record).__name__}, error=e)
            return Outcome(sentinel, e)
        return Outcome(pick(result))

    def insert(self, record: Any) -> Outcome:
        """Insert ``record``; the outcome value is the new row id."""
        outcome = self._write(
            "Insert", build_insert, record, lambda r: r.last_insert_id, INSERT_FAILED
        )
        if outcome.ok:
            logger.info("Insert successfully", context={"id": outcome.value})
        return outcome

    def update(self, record: Any) -> Outcome:
        """Update the row with ``record``'s key; the value is rows affected."""
        outcome = self._write(
            "Update", build_update, record, lambda r: r.rows_affected, UPDATE_FAILED
        )
        if outcome.ok:
            logger.info("Update successfully", context={"affected_rows": outcome.value})
        return outcome

    def delete(self, record: Any) -> Outcome:
        """Delete the row with ``record``'s key; the value is rows deleted."""
        outcome = self._write(
            "Delete", build_delete, record, lambda r: r.rows_affected, DELETE_FAILED
        )
        if outcome.ok:
            logger.info("Delete successfully", context={"deleted_rows": outcome.value})
        return outcome

    def query(self) -> QueryBuilder:
        """Start a new query on this session's handle."""
        return QueryBuilder(self.db, quoting=self.quoting)

    def close(self) -> None:
        """Close the underlying handle."""
        self.db.close()

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
