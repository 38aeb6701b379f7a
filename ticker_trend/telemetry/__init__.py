"""Telemetry and logging subsystem package."""
from .events import TelemetryEvent
from .logging_setup import configure_logging
from .sinks import EventSink, FanOutEventSink, LoggingEventSink, StorageEventSink
from .storage import TelemetryStorage

__all__ = [
    "EventSink",
    "FanOutEventSink",
    "LoggingEventSink",
    "StorageEventSink",
    "TelemetryEvent",
    "TelemetryStorage",
    "configure_logging",
]
