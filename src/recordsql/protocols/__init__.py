"""Protocol interfaces for pluggable backends and mappable records."""

from recordsql.protocols.database import Database, ExecResult, Row, Transaction
from recordsql.protocols.record import Recordable

__all__ = [
    "Database",
    "ExecResult",
    "Recordable",
    "Row",
    "Transaction",
]
