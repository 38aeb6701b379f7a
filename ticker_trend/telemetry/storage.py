"""Helpers for persisting telemetry events."""
from __future__ import annotations

import json
from pathlib import Path

from ticker_trend.core.errors import TelemetryError
from ticker_trend.telemetry.events import TelemetryEvent


class TelemetryStorage:
    """Write structured telemetry objects to disk.

    ``TelemetryStorage`` is instantiated by the main runtime and wrapped in a
    :class:`~ticker_trend.telemetry.sinks.StorageEventSink` so the classifier
    can emit :class:`TelemetryEvent` instances without knowing about files.
    """

    def __init__(self, *, logs_dir: Path) -> None:
        self._logs_dir = logs_dir
        self._logs_dir.mkdir(parents=True, exist_ok=True)

    @property
    def logs_dir(self) -> Path:
        return self._logs_dir

    def append_event(self, event: TelemetryEvent) -> Path:
        """Append ``event`` as JSON to ``events_YYYYMMDD.jsonl`` in the logs dir."""

        date_str = event.timestamp.strftime("%Y%m%d")
        path = self._logs_dir / f"events_{date_str}.jsonl"
        try:
            line = json.dumps(event.to_dict(), ensure_ascii=False)
        except TypeError as exc:
            raise TelemetryError(f"Telemetry event is not JSON serializable: {exc}") from exc
        try:
            with path.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")
        except OSError as exc:  # pragma: no cover - filesystem errors are rare
            raise TelemetryError(f"Failed to write telemetry event: {exc}") from exc
        return path


__all__ = ["TelemetryStorage"]
