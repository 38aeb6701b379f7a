"""Typed configuration models for the trend monitor.

The config subsystem relies on pydantic to validate YAML files and to provide
strongly-typed objects to the rest of the runtime. Every section has defaults,
so an empty ``monitor.yml`` yields a working configuration.
"""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator, model_validator

from ticker_trend.core.enums import HistoryInterval

DEFAULT_SYMBOLS = ["BTC", "ETH", "SOL", "XRP", "DOGE", "ADA", "TRX", "SUI"]


class ClassifierConfig(BaseModel):
    """Window size, momentum gates and threshold policy of the trend classifier.

    The values are tunable, but their relative ordering is part of the
    contract: slight momentum must stay below strong momentum, both must fit
    into the ``window_size - 1`` moves of a full window, and the slight factor
    must scale the threshold down.
    """

    window_size: int = Field(20, ge=3)
    momentum_strong: PositiveInt = 14
    momentum_slight: PositiveInt = 11
    base_threshold: float = Field(1.8, gt=0)
    slight_factor: float = Field(0.6, gt=0, lt=1)
    volatility_multiplier: float = Field(0.3, ge=0)
    volatility_cap: float = Field(2.0, ge=1)
    hysteresis_buffer: float = Field(0.15, ge=0)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_momentum_ordering(self) -> "ClassifierConfig":
        if self.momentum_slight >= self.momentum_strong:
            raise ValueError("momentum_slight must be lower than momentum_strong")
        if self.momentum_strong > self.window_size - 1:
            raise ValueError("momentum_strong cannot exceed the number of moves in the window")
        return self


class FeedConfig(BaseModel):
    """Binance REST endpoint, tracked symbols and polling cadence."""

    rest_endpoint: str = "https://api.binance.com"
    quote_asset: str = Field("USDT", min_length=2)
    symbols: List[str] = Field(default_factory=lambda: list(DEFAULT_SYMBOLS), min_length=1)
    update_interval_sec: PositiveInt = 10
    history_interval: HistoryInterval = HistoryInterval.MIN_5
    request_timeout_sec: float = Field(10.0, gt=0)
    max_retries: PositiveInt = 3
    backoff_base_sec: float = Field(0.25, ge=0)

    @field_validator("symbols")
    @classmethod
    def _normalize_symbols(cls, value: List[str]) -> List[str]:
        normalized = [item.strip().upper() for item in value]
        if any(not item for item in normalized):
            raise ValueError("symbols must not contain blank entries")
        if len(set(normalized)) != len(normalized):
            raise ValueError("symbols must be unique")
        return normalized

    @field_validator("quote_asset")
    @classmethod
    def _normalize_quote(cls, value: str) -> str:
        return value.strip().upper()


class TelemetryConfig(BaseModel):
    """Logging switches; ``record_events`` enables the classifier event channel."""

    log_level: str = Field("INFO")
    logs_dir: str = Field("data/logs")
    record_events: bool = False


class MonitorConfig(BaseModel):
    """Runtime config composed of classifier, feed and telemetry sections."""

    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    feed: FeedConfig = Field(default_factory=FeedConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)
