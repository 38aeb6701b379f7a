"""Configuration loading and validation package."""

from .loader import load_monitor_config, resolve_config
from .models import ClassifierConfig, FeedConfig, MonitorConfig, TelemetryConfig

__all__ = [
    "ClassifierConfig",
    "FeedConfig",
    "MonitorConfig",
    "TelemetryConfig",
    "load_monitor_config",
    "resolve_config",
]
