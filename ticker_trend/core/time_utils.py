"""Utilities for dealing with timezones and timestamps."""
from __future__ import annotations

from datetime import datetime, timezone


def now_utc() -> datetime:
    """Return the current UTC datetime with tzinfo."""

    return datetime.now(timezone.utc)


def to_unix_millis(dt: datetime) -> int:
    """Convert an aware datetime to UNIX milliseconds (Binance time format)."""

    if dt.tzinfo is None:
        raise ValueError("Datetime must be timezone-aware before conversion")
    return int(dt.timestamp() * 1000)
