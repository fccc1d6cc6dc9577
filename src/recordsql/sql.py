"""SQL statement builders for records."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from recordsql.exceptions import MissingPrimaryKeyError
from recordsql.records import as_recordable


class QuotingPolicy(str, Enum):
    """How table names are quoted in generated SQL.

    LEGACY backtick-quotes INSERT and SELECT targets and leaves UPDATE and
    DELETE targets bare.
    """

    LEGACY = "legacy"
    ALWAYS = "always"
    NEVER = "never"


_LEGACY_QUOTED = frozenset({"insert", "select"})


@dataclass(frozen=True)
class Statement:
    """Statement text with ``?`` placeholders and its bound values."""

    text: str
    values: list[Any] = field(default_factory=list)


def quote_table(table: str, kind: str, policy: QuotingPolicy = QuotingPolicy.LEGACY) -> str:
    """Quote ``table`` for a statement of the given kind."""
    if policy is QuotingPolicy.ALWAYS or (
        policy is QuotingPolicy.LEGACY and kind in _LEGACY_QUOTED
    ):
        return f"`{table}`"
    return table


def build_insert(record: Any, quoting: QuotingPolicy = QuotingPolicy.LEGACY) -> Statement:
    """Build ``INSERT INTO `table` (a,b) VALUES (?,?)`` for every non-key column."""
    rec = as_recordable(record)
    key = rec.primary_key()
    key_column = key[0].lower() if key else None

    names: list[str] = []
    values: list[Any] = []
    for column, value in rec.columns():
        if column.lower() == key_column:
            continue
        names.append(column)
        values.append(value)

    table = quote_table(rec.table_name(), "insert", quoting)
    marks = ",".join("?" * len(names))
    text = f"INSERT INTO {table} ({','.join(names)}) VALUES ({marks})"
    return Statement(text, values)


def build_update(record: Any, quoting: QuotingPolicy = QuotingPolicy.LEGACY) -> Statement:
    """Build ``UPDATE table SET id=?,a=?,... WHERE id=?``.

    Every column is in the SET list, the key included, and the key value is
    bound once more for the WHERE clause.
    """
    rec = as_recordable(record)
    key = rec.primary_key()
    if key is None:
        raise MissingPrimaryKeyError(rec.table_name())
    key_column, key_value = key

    pairs = rec.columns()
    sets = ",".join(f"{column}=?" for column, _ in pairs)
    values = [value for _, value in pairs]
    values.append(key_value)

    table = quote_table(rec.table_name(), "update", quoting)
    return Statement(f"UPDATE {table} SET {sets} WHERE {key_column}=?", values)


def build_delete(record: Any, quoting: QuotingPolicy = QuotingPolicy.LEGACY) -> Statement:
    """Build ``DELETE FROM table WHERE id=?`` bound to the key value only."""
    rec = as_recordable(record)
    key = rec.primary_key()
    if key is None:
        raise MissingPrimaryKeyError(rec.table_name())
    key_column, key_value = key

    table = quote_table(rec.table_name(), "delete", quoting)
    return Statement(f"DELETE FROM {table} WHERE {key_column}=?", [key_value])


def build_select(
    table: str,
    clause: str = "",
    values: list[Any] | None = None,
    limit: int | None = None,
    quoting: QuotingPolicy = QuotingPolicy.LEGACY,
) -> Statement:
    """Build ``SELECT * FROM `table` WHERE <clause> [LIMIT n]``.

    The WHERE keyword is left out when ``clause`` is blank.
    """
    text = f"SELECT * FROM {quote_table(table, 'select', quoting)}"
    if clause.strip():
        text += f" WHERE {clause}"
    if limit is not None:
        text += f" LIMIT {int(limit)}"
    return Statement(text, list(values or []))
