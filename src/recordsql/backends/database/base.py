"""Shared lifecycle and statement preparation for database backends."""

from abc import ABC, abstractmethod
from typing import Any, Sequence

from recordsql.exceptions import ConnectError, NotConnectedError, PrepareError
from recordsql.protocols.database import Row, Transaction
from recordsql.utils.placeholders import count_placeholders


class BaseDatabase(ABC):
    """Base class for ``Database`` implementations.

    A handle is usable from construction until a ping fails or it is
    closed. Subclasses implement the driver-specific ``_ping``, ``_begin``,
    ``_fetch``, ``_close`` and ``is_malformed``.
    """

    name = "base"
    driver_errors: tuple[type[BaseException], ...] = ()

    def __init__(self, target: str = "") -> None:
        self.target = target
        self._closed = False
        self._connect_error: BaseException | None = None

    @property
    def usable(self) -> bool:
        return not self._closed and self._connect_error is None

    def ensure_usable(self) -> None:
        """Raise NotConnectedError unless the handle can run statements."""
        if self._closed:
            raise NotConnectedError(f"{self.name} database handle is closed")
        if self._connect_error is not None:
            raise NotConnectedError(
                f"{self.name} database is not connected: {self._connect_error}"
            )

    def ping(self) -> None:
        """Verify connectivity.

        Raises:
            ConnectError: If the server cannot be reached. The handle is
                left unusable.
        """
        if self._closed:
            raise NotConnectedError(f"{self.name} database handle is closed")
        try:
            self._ping()
        except self.driver_errors as e:
            error = ConnectError(f"connect to db failed, uri: {self.target}, error: {e}")
            self._connect_error = error
            raise error from e
        self._connect_error = None

    def prepare(self, query: str, params: Sequence[Any]) -> str:
        """Check the bound value count and convert to the driver's paramstyle.

        Raises:
            PrepareError: If the number of values does not match the
                number of ``?`` placeholders.
        """
        self.ensure_usable()
        expected = count_placeholders(query)
        if expected != len(params):
            raise PrepareError(
                f"sql: expected {expected} arguments, got {len(params)}",
                statement=query,
            )
        return self._native(query)

    def begin(self) -> Transaction:
        """Open a transaction."""
        self.ensure_usable()
        return self._begin()

    def fetch(self, query: str, params: Sequence[Any]) -> list[Row]:
        """Run a ``?``-style SELECT and return its rows."""
        return self._fetch(self.prepare(query, params), params)

    def close(self) -> None:
        """Close the handle. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._close()

    def _native(self, query: str) -> str:
        return query

    @abstractmethod
    def is_malformed(self, error: BaseException) -> bool:
        raise NotImplementedError

    @abstractmethod
    def _ping(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def _begin(self) -> Transaction:
        raise NotImplementedError

    @abstractmethod
    def _fetch(self, query: str, params: Sequence[Any]) -> list[Row]:
        raise NotImplementedError

    @abstractmethod
    def _close(self) -> None:
        raise NotImplementedError
