"""Error hierarchy shared by the monitor subsystems.

The classifier itself never raises; these types cover the I/O edges where
ticks are fetched and telemetry is persisted. Submodules should raise the most
specific error available.
"""
from __future__ import annotations


class CoreError(Exception):
    """Base class for all custom exceptions in the application."""


class MarketDataError(CoreError):
    """Raised for failures while fetching or parsing market data."""


class TelemetryError(CoreError):
    """Raised for telemetry/logging persistence issues."""
