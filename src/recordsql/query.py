"""Fluent SELECT builder.

Example:
    task = session.query().select(Task).where("name", "test").get_one()
    tasks = session.query().select(Task).where("valid", True).or_("count", 3).get_many()

Predicates are concatenated in call order with no parenthesization, so
``where(a).or_(b).and_(c)`` is evaluated by SQL as ``a OR (b AND c)``.
"""

from typing import Any

from recordsql.exceptions import (
    DatabaseUnavailableError,
    NoRowsError,
    QueryError,
    QueryStateError,
    ScanError,
)
from recordsql.observability import Timer, get_logger
from recordsql.protocols.database import Database, Row
from recordsql.records import as_recordable, new_record
from recordsql.reflection import scan_row
from recordsql.sql import QuotingPolicy, Statement, build_select
from recordsql.utils.validation import validate_identifier

logger = get_logger(__name__)


class QueryBuilder:
    """Accumulates a WHERE clause for one record type and fetches rows.

    ``select`` must come first. A builder can run its terminal call more
    than once; each call re-executes the same accumulated query.
    """

    def __init__(
        self,
        db: Database,
        quoting: QuotingPolicy = QuotingPolicy.LEGACY,
    ) -> None:
        self.db = db
        self.quoting = quoting
        self.target: Any = None
        self.record_type: type | None = None
        self.table_name = ""
        self.where_clause = ""
        self.values: list[Any] = []

    def select(self, target: Any) -> "QueryBuilder":
        """Fix the record type to fetch.

        Args:
            target: A record class, or an instance that ``get_one`` writes into
        """
        if isinstance(target, type):
            self.record_type = target
            self.target = None
            template = new_record(target)
        else:
            self.record_type = type(target)
            self.target = target
            template = target
        self.table_name = as_recordable(template).table_name()
        return self

    def _require_select(self, method: str) -> None:
        if self.record_type is None:
            raise QueryStateError(f"select() must be called before {method}()")

    def _predicate(self, method: str, joiner: str, column: str, value: Any) -> "QueryBuilder":
        self._require_select(method)
        validate_identifier(column, "column")
        self.where_clause += f"{joiner} {column} = ? "
        self.values.append(value)
        return self

    def where(self, column: str, value: Any) -> "QueryBuilder":
        """Append `` column = ? ``."""
        return self._predicate("where", "", column, value)

    def and_(self, column: str, value: Any) -> "QueryBuilder":
        """Append `` AND column = ? ``."""
        return self._predicate("and_", " AND", column, value)

    def or_(self, column: str, value: Any) -> "QueryBuilder":
        """Append `` OR column = ? ``."""
        return self._predicate("or_", " OR", column, value)

    def raw(self, clause: str, *values: Any) -> "QueryBuilder":
        """Append arbitrary clause text and its bound values."""
        self._require_select("raw")
        self.where_clause += clause
        self.values.extend(values)
        return self

    def statement(self, limit: int | None = None) -> Statement:
        """The SELECT this builder would run."""
        self._require_select("statement")
        return build_select(
            self.table_name, self.where_clause, self.values, limit, self.quoting
        )

    def _fetch(self, stmt: Statement) -> list[Row]:
        try:
            with Timer() as timer:
                rows = self.db.fetch(stmt.text, stmt.values)
        except (DatabaseUnavailableError, QueryError):
            raise
        except Exception as e:
            raise QueryError(f"sql query failed, error: {e}") from e
        logger.debug(
            stmt.text,
            context={"rows": len(rows)},
            duration_ms=timer.duration_ms,
        )
        return rows

    def get_one(self) -> Any:
        """Fetch the first matching row into the target record.

        Writes into the instance passed to ``select``, or into a fresh
        instance when a class was passed.

        Raises:
            NoRowsError: If nothing matched
            ScanError: If the row does not fit the record; fields before the
                failing one have already been written
            QueryError: If the database rejected the query
        """
        stmt = self.statement(limit=1)
        rows = self._fetch(stmt)
        if not rows:
            raise NoRowsError(self.table_name)

        target = self.target if self.target is not None else new_record(self.record_type)
        scan_row(rows[0].values(), as_recordable(target).slots())
        return target

    def get_many(self) -> list[Any]:
        """Fetch every matching row, each into a fresh record.

        Rows that fail to scan are logged and skipped.

        Raises:
            QueryError: If the database rejected the query
        """
        stmt = self.statement()
        rows = self._fetch(stmt)

        records = []
        for index, row in enumerate(rows):
            record = new_record(self.record_type)
            try:
                scan_row(row.values(), as_recordable(record).slots())
            except ScanError as e:
                logger.error(
                    "skipping row that failed to scan",
                    context={"table": self.table_name, "row": index},
                    error=e,
                )
                continue
            records.append(record)
        return records
