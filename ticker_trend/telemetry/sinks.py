"""Event sinks the classifier can be given to report its decisions.

A sink is an optional capability: the classifier emits events only when one is
attached, so there is no hidden global switch for its diagnostics.
"""
from __future__ import annotations

import logging
from typing import List, Protocol

from ticker_trend.telemetry.events import TelemetryEvent
from ticker_trend.telemetry.storage import TelemetryStorage


class EventSink(Protocol):
    def emit(self, event: TelemetryEvent) -> None:
        ...


class LoggingEventSink:
    """Forward events to a logger as structured records."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def emit(self, event: TelemetryEvent) -> None:
        level = logging.getLevelName(event.level.upper())
        if not isinstance(level, int):
            level = logging.INFO
        self._logger.log(
            level,
            event.event_type,
            extra={"event_type": event.event_type, "payload": event.payload, **event.context},
        )


class StorageEventSink:
    """Append events to the daily JSONL file of a :class:`TelemetryStorage`."""

    def __init__(self, storage: TelemetryStorage) -> None:
        self._storage = storage

    def emit(self, event: TelemetryEvent) -> None:
        self._storage.append_event(event)


class FanOutEventSink:
    """Deliver each event to several sinks in order."""

    def __init__(self, *sinks: EventSink) -> None:
        self._sinks: List[EventSink] = list(sinks)

    def emit(self, event: TelemetryEvent) -> None:
        for sink in self._sinks:
            sink.emit(event)


__all__ = ["EventSink", "FanOutEventSink", "LoggingEventSink", "StorageEventSink"]
