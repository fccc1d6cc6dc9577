"""recordsql exceptions."""

from typing import Any


class RecordSQLError(Exception):
    """Base exception for recordsql."""

    pass


class ConfigError(RecordSQLError):
    """Configuration error."""

    pass


class MappingError(RecordSQLError):
    """A record could not be mapped to a table."""

    pass


class NotAStructError(MappingError):
    """Argument is not a record (dataclass) value or type."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"param type is not a record: {type(value).__name__}")


class EmptyNameError(MappingError):
    """An empty identifier cannot be turned into a column or table name."""

    def __init__(self) -> None:
        super().__init__("error name: identifier is empty")


class MissingPrimaryKeyError(MappingError):
    """Record type has no primary key field."""

    def __init__(self, table: str, key: str = "id") -> None:
        self.table = table
        self.key = key
        super().__init__(f"record for table '{table}' has no '{key}' field")


class DatabaseUnavailableError(RecordSQLError):
    """The database handle cannot be used."""

    pass


class ConnectError(DatabaseUnavailableError):
    """Initial connection or ping failed."""

    pass


class NotConnectedError(DatabaseUnavailableError):
    """Operation attempted on a handle that never connected or was closed."""

    pass


class StatementError(RecordSQLError):
    """Base class for INSERT/UPDATE/DELETE execution failures."""

    def __init__(self, message: str, statement: str | None = None) -> None:
        self.statement = statement
        super().__init__(message)


class TransactionError(StatementError):
    """Could not open a database transaction."""

    pass


class PrepareError(StatementError):
    """The statement was rejected before execution."""

    pass


class ExecError(StatementError):
    """The statement failed while executing."""

    pass


class CommitError(ExecError):
    """The statement executed but the transaction did not commit."""

    pass


class QueryError(RecordSQLError):
    """SELECT execution failed."""

    pass


class QueryStateError(QueryError):
    """Query builder method called in the wrong state."""

    pass


class ScanError(QueryError):
    """A result row could not be decoded into a record."""

    def __init__(self, message: str, column: str | None = None) -> None:
        self.column = column
        super().__init__(message)


class NoRowsError(ScanError):
    """Query matched no rows."""

    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(f"no rows in result set for table '{table}'")
