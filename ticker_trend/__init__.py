"""Top-level package for the ticker trend monitor.

The package exposes the subsystems (config, core, market, data_feed, telemetry)
used to turn a live stream of prices into per-symbol trend states. Each
subpackage should remain import-safe for any runtime component.
"""

__all__: list[str] = []
