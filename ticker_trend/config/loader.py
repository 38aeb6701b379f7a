"""YAML loader for the config subsystem.

``monitor.yml`` holds three optional sections (``classifier``, ``feed``,
``telemetry``); the loader validates the file via models.py and returns a
typed :class:`MonitorConfig`.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

import yaml

from .models import MonitorConfig

_DEFAULT_CONFIG_DIR = Path("config")
CONFIG_PATH_ENV = "TICKER_TREND_CONFIG"


def _read_yaml(path: Path) -> Mapping:
    """Read a YAML file and return a mapping (empty dict if file is blank)."""

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}
    if not isinstance(data, Mapping):
        raise ValueError(f"YAML root must be a mapping in {path}")
    return data


def load_monitor_config(path: Path | str = _DEFAULT_CONFIG_DIR / "monitor.yml") -> MonitorConfig:
    """Load monitor.yml (classifier policy, feed settings, telemetry)."""

    data = _read_yaml(Path(path))
    return MonitorConfig.model_validate(data)


def resolve_config(config_dir: Path) -> MonitorConfig:
    """Load the config named by ``TICKER_TREND_CONFIG`` or ``config_dir/monitor.yml``.

    An explicitly configured path must exist. Without one, a missing
    ``monitor.yml`` falls back to the built-in defaults.
    """

    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        return load_monitor_config(env_path)
    candidate = config_dir / "monitor.yml"
    if candidate.exists():
        return load_monitor_config(candidate)
    return MonitorConfig()
