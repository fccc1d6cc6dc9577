"""Tests for the statement executor."""

import logging

import pytest

from recordsql.exceptions import (
    CommitError,
    ExecError,
    NotConnectedError,
    PrepareError,
    TransactionError,
)
from recordsql.executor import execute

INSERT = "INSERT INTO `task` (name,url,count,valid,createAt) VALUES (?,?,?,?,?)"


def count_rows(db) -> int:
    return db.fetch("SELECT COUNT(*) FROM task", [])[0].values()[0]


class TestExecute:
    """Tests for execute."""

    def test_insert_returns_last_insert_id(self, db):
        first = execute(db, INSERT, ["a", "u", 1, True, 0])
        second = execute(db, INSERT, ["b", "u", 1, True, 0])
        assert first.last_insert_id == 1
        assert second.last_insert_id == 2
        assert first.rows_affected == 1

    def test_update_reports_rows_affected(self, db):
        execute(db, INSERT, ["a", "u", 1, True, 0])
        execute(db, INSERT, ["b", "u", 1, True, 0])
        result = execute(db, "UPDATE task SET url=? WHERE url=?", ["v", "u"])
        assert result.rows_affected == 2

    def test_commits(self, db):
        execute(db, INSERT, ["a", "u", 1, True, 0])
        assert count_rows(db) == 1

    def test_constraint_violation_raises_exec_error(self, db):
        execute(db, INSERT, ["a", "u", 1, True, 0])
        with pytest.raises(ExecError, match="UNIQUE") as exc_info:
            execute(db, INSERT, ["a", "u", 1, True, 0])
        assert exc_info.value.statement == INSERT
        assert exc_info.value.__cause__ is not None
        assert count_rows(db) == 1

    def test_unknown_table_raises_prepare_error(self, db):
        with pytest.raises(PrepareError, match="no such table"):
            execute(db, "DELETE FROM missing WHERE id=?", [1])

    def test_syntax_error_raises_prepare_error(self, db):
        with pytest.raises(PrepareError):
            execute(db, "INSERT INTO `task` () VALUES ()", [])

    def test_value_count_mismatch_raises_prepare_error(self, db):
        with pytest.raises(PrepareError, match="expected 5 arguments, got 2"):
            execute(db, INSERT, ["a", "u"])

    def test_failure_rolls_back_and_releases(self, db):
        with pytest.raises(PrepareError):
            execute(db, INSERT, ["a"])
        # The handle is usable again after the failed statement
        execute(db, INSERT, ["a", "u", 1, True, 0])
        assert count_rows(db) == 1

    def test_closed_handle_raises_not_connected(self, db):
        db.close()
        with pytest.raises(NotConnectedError):
            execute(db, INSERT, ["a", "u", 1, True, 0])

    def test_begin_failure_raises_transaction_error(self, db, monkeypatch):
        def broken_begin():
            raise RuntimeError("pool exhausted")

        monkeypatch.setattr(db, "_begin", broken_begin)
        with pytest.raises(TransactionError, match="pool exhausted"):
            execute(db, INSERT, ["a", "u", 1, True, 0])

    def test_commit_failure_raises_commit_error(self, db, monkeypatch):
        real_begin = db._begin

        def begin_with_failing_commit():
            tx = real_begin()

            def commit():
                raise RuntimeError("disk full")

            tx.commit = commit
            return tx

        monkeypatch.setattr(db, "_begin", begin_with_failing_commit)
        with pytest.raises(CommitError, match="disk full"):
            execute(db, INSERT, ["a", "u", 1, True, 0])
        monkeypatch.undo()
        assert count_rows(db) == 0

    def test_logs_statement_at_debug(self, db, caplog):
        with caplog.at_level(logging.DEBUG, logger="recordsql"):
            execute(db, INSERT, ["a", "u", 1, True, 0])

        records = [r for r in caplog.records if r.name == "recordsql.executor"]
        assert records[-1].getMessage() == INSERT
        assert records[-1].funcName == "execute"
        assert records[-1].duration_ms >= 0
