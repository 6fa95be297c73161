"""Helpers for reading PostgREST response rows."""

import logging
from collections.abc import Callable
from typing import TypeVar

from myfridge.domain.errors import ParseFailure

_logger = logging.getLogger(__name__)

T = TypeVar("T")


def rows(data: object) -> list[dict[str, object]]:
    """Return response rows, treating a missing payload as empty."""
    if isinstance(data, list):
        return [row for row in data if isinstance(row, dict)]
    return []


def parse_rows(
    data: object, parser: Callable[[dict[str, object]], T], table: str
) -> list[T]:
    """Parse every row, skipping rows whose required columns are malformed."""
    parsed = []
    for row in rows(data):
        try:
            parsed.append(parser(row))
        except ParseFailure as exc:
            _logger.warning("Skipping malformed %s row: %s", table, exc)
    return parsed


def lenient(
    parser: Callable[[object], T],
    row: dict[str, object],
    key: str,
) -> T | None:
    """Read an optional column, treating an unparsable value as missing."""
    try:
        return parser(row.get(key))
    except ParseFailure:
        _logger.warning("Ignoring invalid %s value %r", key, row.get(key))
        return None


def optional_int(value: object) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ParseFailure(f"Invalid integer value: {value!r}") from exc


def require_int(row: dict[str, object], key: str) -> int:
    value = optional_int(row.get(key))
    if value is None:
        raise ParseFailure(f"Missing integer column {key!r}")
    return value


def optional_float(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ParseFailure(f"Invalid number value: {value!r}") from exc


def optional_str(value: object) -> str | None:
    if value is None:
        return None
    return str(value)


def str_tuple(value: object) -> tuple[str, ...]:
    """Read a text array column; null becomes an empty tuple."""
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list | tuple):
        return tuple(str(item) for item in value if item is not None)
    raise ParseFailure(f"Invalid text array value: {value!r}")


def int_column(data: object, key: str) -> list[int]:
    """Return the parsable integers of one column, in row order."""
    values = (lenient(optional_int, row, key) for row in rows(data))
    return [value for value in values if value is not None]
