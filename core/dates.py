"""Conversion between calendar dates and the ``YYYY-MM-DD`` wire format."""

from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[date, datetime, str]


def format_wire_date(value: Optional[DateLike]) -> Optional[str]:
    """
    Render a calendar date as ``YYYY-MM-DD``.

    Only the value's own year/month/day are used, so an aware ``datetime``
    keeps the day the user typed instead of being shifted to another zone.
    Strings already in wire format are parsed and rendered again.

    Args:
        value: A ``date``, ``datetime``, wire string or ``None``

    Returns:
        The 10-character wire string, or ``None`` when the date is unset

    Raises:
        ValueError: If the value is not a date or a valid wire string
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = parse_wire_date(value)
        if value is None:
            return None
    if not isinstance(value, date):
        raise ValueError(f"Unsupported date value: {value!r}")
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_wire_date(value: Optional[str]) -> Optional[date]:
    """Parse a ``YYYY-MM-DD`` string; empty input means no date."""
    if value is None or not value.strip():
        return None
    text = value.strip()
    if len(text) != 10:
        raise ValueError(f"Expected a YYYY-MM-DD date, got {value!r}")
    return date.fromisoformat(text)
