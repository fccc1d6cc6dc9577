"""Naming and record introspection helpers.

Records are dataclasses. Field declaration order is column order, and a
result row is written back into a record through its ``FieldSlot`` list in
that same order, so a record's fields must line up with the table's
physical columns for ``SELECT *`` to scan correctly.
"""

import dataclasses
import types
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache
from typing import Any, Sequence, Union, get_args, get_origin, get_type_hints

from recordsql.exceptions import (
    EmptyNameError,
    MappingError,
    NotAStructError,
    ScanError,
)

SCALAR_KINDS: tuple[type, ...] = (str, int, float, bool)

ZERO_VALUES: dict[type, Any] = {str: "", int: 0, float: 0.0, bool: False}

_TRUE_TEXT = frozenset({"1", "t", "true"})
_FALSE_TEXT = frozenset({"0", "f", "false"})


def column_name(name: str) -> str:
    """Lowercase the first character of an identifier.

    Only the first character changes: ``"URL"`` becomes ``"uRL"``.
    """
    if not name:
        raise EmptyNameError()
    return name[0].lower() + name[1:]


@dataclass(frozen=True)
class FieldSpec:
    """One record field and the column it maps to."""

    attr: str
    column: str
    kind: type
    nullable: bool = False


@dataclass(frozen=True)
class RecordSchema:
    """Table mapping derived from a record class."""

    record_type: type
    table: str
    fields: tuple[FieldSpec, ...]
    primary_key: FieldSpec | None

    @property
    def columns(self) -> list[str]:
        return [f.column for f in self.fields]


def _resolve_kind(hint: Any) -> tuple[type, bool]:
    """Map a type annotation to a scalar kind and nullability."""
    nullable = False
    origin = get_origin(hint)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(hint) if a is not type(None)]
        nullable = len(args) < len(get_args(hint))
        hint = args[0] if len(args) == 1 else str
    if hint in SCALAR_KINDS:
        return hint, nullable
    # Unrecognized kinds are stored as text
    return str, nullable


@lru_cache(maxsize=None)
def _describe_class(cls: type) -> RecordSchema:
    hints = get_type_hints(cls)
    specs = []
    for f in dataclasses.fields(cls):
        kind, nullable = _resolve_kind(hints.get(f.name, str))
        specs.append(FieldSpec(f.name, column_name(f.name), kind, nullable))

    table = getattr(cls, "__table__", None) or column_name(cls.__name__)
    key_name = getattr(cls, "__primary_key__", "id").lower()
    primary_key = next((s for s in specs if s.column.lower() == key_name), None)
    return RecordSchema(cls, table, tuple(specs), primary_key)


def describe(record: Any) -> RecordSchema:
    """Return the table mapping for a record instance or record class.

    Raises:
        NotAStructError: If ``record`` is not a dataclass instance or type.
    """
    cls = record if isinstance(record, type) else type(record)
    if not dataclasses.is_dataclass(cls):
        raise NotAStructError(record)
    return _describe_class(cls)


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, (bytes, str)):
        text = value.decode() if isinstance(value, bytes) else value
        if text.lower() in _TRUE_TEXT:
            return True
        if text.lower() in _FALSE_TEXT:
            return False
    raise ValueError(f"invalid syntax for bool: {value!r}")


def _to_int(value: Any) -> int:
    if isinstance(value, (float, Decimal)) and value != int(value):
        raise ValueError(f"value {value!r} has a fractional part")
    if isinstance(value, bytes):
        value = value.decode()
    return int(value)


def _bind_value(spec: FieldSpec, value: Any) -> Any:
    if value is None:
        return None
    if spec.kind is bool:
        return _to_bool(value)
    if spec.kind is int:
        return _to_int(value)
    if spec.kind is float:
        return float(value)
    return value if isinstance(value, str) else str(value)


def field_values(record: Any) -> list[Any]:
    """Return the record's field values in declaration order.

    Each value is coerced to its field's declared kind with the same rules
    used when scanning rows, so a value that would not read back unchanged
    (``3.7`` for an ``int`` field, ``"maybe"`` for a ``bool``) is rejected.

    Raises:
        MappingError: If a value does not fit its field's kind.
    """
    schema = describe(record)
    values = []
    for spec in schema.fields:
        try:
            values.append(_bind_value(spec, getattr(record, spec.attr)))
        except (TypeError, ValueError, OverflowError) as e:
            raise MappingError(
                f"field '{spec.attr}' of {schema.record_type.__name__} "
                f"is not a valid {spec.kind.__name__}: {e}"
            ) from e
    return values


def convert_value(spec: FieldSpec, value: Any) -> Any:
    """Convert a column value to the kind declared for ``spec``.

    Raises:
        ScanError: If the value cannot be represented as the field's kind.
    """
    if value is None:
        if spec.nullable:
            return None
        raise ScanError(
            f"converting NULL to {spec.kind.__name__} is unsupported "
            f"(column '{spec.column}')",
            column=spec.column,
        )
    try:
        if spec.kind is bool:
            return _to_bool(value)
        if spec.kind is int:
            return _to_int(value)
        if spec.kind is float:
            return float(value)
        if isinstance(value, bytes):
            return value.decode()
        return str(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise ScanError(
            f"converting {value!r} to {spec.kind.__name__} failed "
            f"(column '{spec.column}'): {e}",
            column=spec.column,
        ) from e


@dataclass(frozen=True)
class FieldSlot:
    """Writable destination for one field of one record instance.

    Writes bypass ``__setattr__`` so frozen dataclass records can be filled.
    """

    record: Any
    spec: FieldSpec

    def set(self, value: Any) -> None:
        object.__setattr__(self.record, self.spec.attr, convert_value(self.spec, value))

    def get(self) -> Any:
        return getattr(self.record, self.spec.attr)


def field_slots(record: Any) -> list[FieldSlot]:
    """Return writable slots for each field, in declaration order."""
    if isinstance(record, type):
        raise NotAStructError(record)
    schema = describe(record)
    return [FieldSlot(record, spec) for spec in schema.fields]


def scan_row(values: Sequence[Any], slots: Sequence[FieldSlot]) -> None:
    """Write one result row into ``slots`` positionally.

    Slots are written in order, so a conversion failure leaves the earlier
    fields already updated.
    """
    if len(values) != len(slots):
        raise ScanError(
            f"expected {len(slots)} destination arguments in scan, not {len(values)}"
        )
    for slot, value in zip(slots, values):
        slot.set(value)


def blank(record_type: type) -> Any:
    """Allocate a record with zero values without calling ``__init__``."""
    if not isinstance(record_type, type):
        raise NotAStructError(record_type)
    schema = describe(record_type)
    instance = object.__new__(record_type)
    for spec in schema.fields:
        object.__setattr__(instance, spec.attr, ZERO_VALUES[spec.kind])
    return instance
