"""Database protocol for SQL backends."""

from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence


@dataclass
class Row:
    """Type-safe row access with attribute-style access."""

    _data: dict[str, Any] = field(repr=False)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            return object.__getattribute__(self, name)
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(f"Row has no column '{name}'") from None

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def keys(self) -> list[str]:
        """Return column names."""
        return list(self._data.keys())

    def values(self) -> list[Any]:
        """Return column values in result order."""
        return list(self._data.values())

    def to_dict(self) -> dict[str, Any]:
        """Convert row to dictionary."""
        return dict(self._data)


@dataclass(frozen=True)
class ExecResult:
    """Outcome of a successful INSERT, UPDATE or DELETE."""

    last_insert_id: int
    rows_affected: int


class Transaction(Protocol):
    """A single open transaction on one pooled connection."""

    def execute(self, query: str, params: Sequence[Any]) -> ExecResult:
        """Execute a driver-native statement inside the transaction."""
        ...

    def commit(self) -> None:
        """Commit and release the connection."""
        ...

    def rollback(self) -> None:
        """Roll back and release the connection."""
        ...


class Database(Protocol):
    """Protocol for SQL database backends (MySQL, SQLite).

    Statements use ``?`` placeholders; ``prepare`` turns them into the
    driver's own parameter style.
    """

    name: str

    @property
    def usable(self) -> bool:
        """Whether the handle connected and has not been closed."""
        ...

    def ping(self) -> None:
        """Verify connectivity. Raises ConnectError on failure."""
        ...

    def prepare(self, query: str, params: Sequence[Any]) -> str:
        """Validate a statement and convert it to the driver's paramstyle."""
        ...

    def begin(self) -> Transaction:
        """Open a transaction on a pooled connection."""
        ...

    def fetch(self, query: str, params: Sequence[Any]) -> list[Row]:
        """Run a SELECT and return its rows."""
        ...

    def is_malformed(self, error: BaseException) -> bool:
        """Whether a driver error means the statement itself was rejected."""
        ...

    def close(self) -> None:
        """Release every pooled connection."""
        ...
