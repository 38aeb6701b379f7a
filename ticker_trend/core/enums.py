"""Enumerations shared across the monitor subsystems.

They live in the core package so that the classifier, the feed client and the
telemetry layer can import them without introducing circular dependencies.
"""
from __future__ import annotations

from enum import Enum


class TrendState(str, Enum):
    """Debounced short-term trend of a single symbol."""

    STRONG_UP = "strong-up"
    SLIGHT_UP = "slight-up"
    NEUTRAL = "neutral"
    SLIGHT_DOWN = "slight-down"
    STRONG_DOWN = "strong-down"

    @property
    def is_strong(self) -> bool:
        return self in (TrendState.STRONG_UP, TrendState.STRONG_DOWN)


class HistoryInterval(str, Enum):
    """Kline intervals supported for the sparkline price history."""

    MIN_5 = "5m"
    MIN_15 = "15m"
    MIN_30 = "30m"
    HOUR_1 = "1h"
    DAY_1 = "1d"
