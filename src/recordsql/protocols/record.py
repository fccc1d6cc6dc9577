"""Record protocol: what a value must expose to be mapped to a table."""

from typing import Any, Protocol, runtime_checkable

from recordsql.reflection import FieldSlot


@runtime_checkable
class Recordable(Protocol):
    """Explicit field-to-column mapping for one record value."""

    def table_name(self) -> str:
        """Table the record is stored in."""
        ...

    def columns(self) -> list[tuple[str, Any]]:
        """Ordered ``(column, value)`` pairs, primary key included."""
        ...

    def primary_key(self) -> tuple[str, Any] | None:
        """``(column, value)`` of the primary key, or None if there is none."""
        ...

    def slots(self) -> list[FieldSlot]:
        """Writable destinations for each column, in column order."""
        ...
