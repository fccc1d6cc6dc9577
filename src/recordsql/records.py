"""Record base class and adaptation of plain dataclasses.

Example:
    @dataclass
    class Task(Record):
        id: int = 0
        name: str = ""
        url: str = ""
        count: int = 0
        valid: bool = False
        createAt: int = 0

``Task`` maps to table ``task`` with columns ``id, name, url, count, valid,
createAt``. Set ``__table__`` or ``__primary_key__`` on the class to
override either name.
"""

import dataclasses
from typing import Any

from recordsql.exceptions import NotAStructError
from recordsql.protocols.record import Recordable
from recordsql.reflection import (
    FieldSlot,
    blank,
    describe,
    field_slots,
    field_values,
)


class Record:
    """Mixin implementing ``Recordable`` for a dataclass."""

    @classmethod
    def table_name(cls) -> str:
        return describe(cls).table

    def columns(self) -> list[tuple[str, Any]]:
        return list(zip(describe(self).columns, field_values(self)))

    def primary_key(self) -> tuple[str, Any] | None:
        key = describe(self).primary_key
        if key is None:
            return None
        return key.column, field_values(self)[describe(self).fields.index(key)]

    def slots(self) -> list[FieldSlot]:
        return field_slots(self)

    @classmethod
    def blank(cls) -> Any:
        """A fresh instance with zero values in every field."""
        return blank(cls)


class DataclassRecord:
    """Adapts a dataclass that does not subclass ``Record``."""

    def __init__(self, instance: Any) -> None:
        self.instance = instance
        self.schema = describe(instance)

    def table_name(self) -> str:
        return self.schema.table

    def columns(self) -> list[tuple[str, Any]]:
        return list(zip(self.schema.columns, field_values(self.instance)))

    def primary_key(self) -> tuple[str, Any] | None:
        key = self.schema.primary_key
        if key is None:
            return None
        return key.column, field_values(self.instance)[self.schema.fields.index(key)]

    def slots(self) -> list[FieldSlot]:
        return field_slots(self.instance)


def as_recordable(value: Any) -> Recordable:
    """Return ``value`` as a ``Recordable``.

    Raises:
        NotAStructError: If ``value`` is a class or neither a ``Recordable``
            nor a dataclass instance.
    """
    if isinstance(value, type):
        raise NotAStructError(value)
    if isinstance(value, Recordable):
        return value
    if dataclasses.is_dataclass(value):
        return DataclassRecord(value)
    raise NotAStructError(value)


def new_record(record_type: type) -> Any:
    """Allocate a fresh, zero-valued instance of ``record_type``."""
    if not isinstance(record_type, type):
        raise NotAStructError(record_type)
    factory = getattr(record_type, "blank", None)
    if callable(factory):
        return factory()
    return blank(record_type)
