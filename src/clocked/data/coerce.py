"""Lenient conversion of loosely typed JSON and SQLite values."""

from __future__ import annotations


def as_str(value: object) -> str:
    return value if isinstance(value, str) else ""


def as_optional_str(value: object) -> str | None:
    """The value if it is a non-empty string, else None."""
    if isinstance(value, str) and value:
        return value
    return None


def as_int(value: object) -> int:
    """Coerce ints, floats and numeric strings; anything else is 0."""
    match value:
        case bool():
            return int(value)
        case int():
            return value
        case float():
            return int(value)
        case str():
            try:
                return int(float(value))
            except ValueError:
                return 0
        case _:
            return 0
