"""recordsql - Map dataclass records to SQL tables without writing statements."""

from recordsql.config import Config, DatabaseConfig, LoggingConfig
from recordsql.connection import connect
from recordsql.executor import execute
from recordsql.observability import (
    LogLevel,
    StructuredLogger,
    Timer,
    configure_logging,
    get_logger,
)
from recordsql.protocols import Database, ExecResult, Recordable, Row
from recordsql.query import QueryBuilder
from recordsql.records import Record, as_recordable
from recordsql.reflection import column_name, field_slots, field_values
from recordsql.session import Outcome, Session
from recordsql.sql import (
    QuotingPolicy,
    Statement,
    build_delete,
    build_insert,
    build_select,
    build_update,
)

__version__ = "0.1.0"
__all__ = [
    # Core
    "Config",
    "DatabaseConfig",
    "LoggingConfig",
    "Outcome",
    "QueryBuilder",
    "Record",
    "Session",
    "connect",
    "execute",
    # Mapping
    "Recordable",
    "as_recordable",
    "column_name",
    "field_slots",
    "field_values",
    # SQL
    "QuotingPolicy",
    "Statement",
    "build_delete",
    "build_insert",
    "build_select",
    "build_update",
    # Backends
    "Database",
    "ExecResult",
    "Row",
    # Observability
    "LogLevel",
    "StructuredLogger",
    "Timer",
    "configure_logging",
    "get_logger",
]
