"""Run one write statement in its own transaction."""

from typing import Any, Sequence

from recordsql.exceptions import (
    CommitError,
    DatabaseUnavailableError,
    ExecError,
    PrepareError,
    TransactionError,
)
from recordsql.observability import Timer, get_logger
from recordsql.protocols.database import Database, ExecResult, Transaction

logger = get_logger(__name__)


def _rollback(tx: Transaction) -> None:
    try:
        tx.rollback()
    except Exception as e:
        logger.warning("rollback failed", error=e)


def execute(db: Database, query: str, values: Sequence[Any]) -> ExecResult:
    """Begin, prepare, execute and commit a single ``?``-style statement.

    Every failure after the transaction opened rolls it back.

    Raises:
        NotConnectedError: If the handle is unusable
        TransactionError: If a transaction could not be opened
        PrepareError: If the statement is malformed or its values do not
            match its placeholders
        ExecError: If the driver failed while executing
        CommitError: If the commit failed
    """
    try:
        tx = db.begin()
    except DatabaseUnavailableError:
        raise
    except Exception as e:
        raise TransactionError(
            f"open database transaction failed, error: {e}", statement=query
        ) from e

    try:
        native = db.prepare(query, values)
    except (PrepareError, DatabaseUnavailableError):
        _rollback(tx)
        raise

    try:
        with Timer() as timer:
            result = tx.execute(native, values)
    except Exception as e:
        _rollback(tx)
        if db.is_malformed(e):
            raise PrepareError(f"sql prepare failed, error: {e}", statement=query) from e
        raise ExecError(f"sql exec failed, error: {e}", statement=query) from e

    try:
        tx.commit()
    except Exception as e:
        _rollback(tx)
        raise CommitError(f"sql commit failed, error: {e}", statement=query) from e

    logger.debug(
        query,
        context={
            "rows_affected": result.rows_affected,
            "last_insert_id": result.last_insert_id,
        },
        duration_ms=timer.duration_ms,
    )
    return result
