"""Utility modules."""

from recordsql.utils.placeholders import count_placeholders, to_format_paramstyle
from recordsql.utils.validation import validate_identifier

__all__ = ["count_placeholders", "to_format_paramstyle", "validate_identifier"]
