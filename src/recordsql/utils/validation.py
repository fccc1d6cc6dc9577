"""Input validation utilities."""

import re

# SQL identifier: letters, digits and underscores, not starting with a digit
SAFE_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def validate_identifier(value: str, name: str = "identifier", max_length: int = 64) -> str:
    """Validate a column or table name before it is spliced into SQL text.

    Args:
        value: The identifier to validate
        name: Name of the field for error messages
        max_length: Maximum allowed length (MySQL limit is 64)

    Returns:
        The validated identifier

    Raises:
        ValueError: If the identifier is invalid
    """
    if not value:
        raise ValueError(f"{name} cannot be empty")

    if len(value) > max_length:
        raise ValueError(f"{name} exceeds maximum length of {max_length}")

    if not SAFE_IDENTIFIER_RE.match(value):
        raise ValueError(
            f"Invalid {name} {value!r}: must start with a letter or underscore "
            "and contain only alphanumeric characters and underscores"
        )

    return value
