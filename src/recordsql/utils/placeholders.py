"""``?`` placeholder handling for SQL text."""

import re

# Quoted literals and identifiers are matched first so a ``?`` inside them
# is never treated as a placeholder.
_TOKEN_PATTERN = re.compile(r"'(?:[^'\\]|\\.|'')*'|\"(?:[^\"\\]|\\.)*\"|`[^`]*`|\?")


def count_placeholders(query: str) -> int:
    """Count ``?`` placeholders outside quoted literals."""
    return sum(1 for m in _TOKEN_PATTERN.finditer(query) if m.group(0) == "?")


def to_format_paramstyle(query: str) -> str:
    """Rewrite ``?`` placeholders as ``%s`` for format-paramstyle drivers.

    Literal ``%`` characters are doubled so the driver's ``%`` interpolation
    leaves them intact.
    """
    def replace(match: re.Match[str]) -> str:
        token = match.group(0)
        if token == "?":
            return "%s"
        return token.replace("%", "%%")

    pieces = []
    last = 0
    for match in _TOKEN_PATTERN.finditer(query):
        pieces.append(query[last:match.start()].replace("%", "%%"))
        pieces.append(replace(match))
        last = match.end()
    pieces.append(query[last:].replace("%", "%%"))
    return "".join(pieces)
