from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest
from pydantic import ValidationError

from ticker_trend.config.loader import CONFIG_PATH_ENV, load_monitor_config, resolve_config
from ticker_trend.core.enums import HistoryInterval


def _write_yaml(path: Path, content: str) -> Path:
    path.write_text(dedent(content), encoding="utf-8")
    return path


def test_load_monitor_config_should_parse_valid_yaml(tmp_path: Path) -> None:
    path = _write_yaml(
        tmp_path / "monitor.yml",
        """
        classifier:
          window_size: 30
          momentum_strong: 20
          momentum_slight: 16
        feed:
          symbols: [btc, sol]
          history_interval: 1h
          update_interval_sec: 5
        telemetry:
          log_level: DEBUG
          record_events: true
        """,
    )
    config = load_monitor_config(path)
    assert config.classifier.window_size == 30
    assert config.classifier.base_threshold == 1.8
    assert config.feed.symbols == ["BTC", "SOL"]
    assert config.feed.history_interval is HistoryInterval.HOUR_1
    assert config.feed.update_interval_sec == 5
    assert config.telemetry.log_level == "DEBUG"
    assert config.telemetry.record_events is True


def test_load_monitor_config_should_accept_blank_file(tmp_path: Path) -> None:
    path = _write_yaml(tmp_path / "monitor.yml", "")
    config = load_monitor_config(path)
    assert config.classifier.window_size == 20


def test_load_monitor_config_should_reject_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_monitor_config(tmp_path / "absent.yml")


def test_load_monitor_config_should_require_mapping_root(tmp_path: Path) -> None:
    path = _write_yaml(tmp_path / "monitor.yml", "- just\n- a list\n")
    with pytest.raises(ValueError):
        load_monitor_config(path)


def test_load_monitor_config_should_validate_values(tmp_path: Path) -> None:
    path = _write_yaml(
        tmp_path / "monitor.yml",
        """
        classifier:
          momentum_strong: 10
          momentum_slight: 12
        """,
    )
    with pytest.raises(ValidationError):
        load_monitor_config(path)


def test_resolve_config_should_prefer_env_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    custom = _write_yaml(tmp_path / "custom.yml", "feed:\n  symbols: [ADA]\n")
    monkeypatch.setenv(CONFIG_PATH_ENV, str(custom))
    assert resolve_config(tmp_path / "config").feed.symbols == ["ADA"]


def test_resolve_config_should_fall_back_to_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_PATH_ENV, raising=False)
    assert resolve_config(tmp_path / "missing").feed.quote_asset == "USDT"

    config_dir = tmp_path / "config"
    config_dir.mkdir()
    _write_yaml(config_dir / "monitor.yml", "feed:\n  quote_asset: fdusd\n")
    assert resolve_config(config_dir).feed.quote_asset == "FDUSD"
