"""Shared type aliases for readability and contract enforcement.

Prices and symbols travel between the feed, the classifier and telemetry; the
aliases below keep those values from being mixed up.
"""
from __future__ import annotations

from typing import NewType, Sequence, TypeAlias

Symbol = NewType("Symbol", str)
Price = NewType("Price", float)

NumericSequence: TypeAlias = Sequence[float]
