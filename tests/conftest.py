from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, List

import httpx
import pytest

from ticker_trend.config.models import ClassifierConfig, FeedConfig
from ticker_trend.telemetry.events import TelemetryEvent


class RecordingSink:
    def __init__(self) -> None:
        self.events: list[TelemetryEvent] = []

    def emit(self, event: TelemetryEvent) -> None:
        self.events.append(event)

    def types(self) -> list[str]:
        return [event.event_type for event in self.events]


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture(scope="session")
def classifier_config() -> ClassifierConfig:
    return ClassifierConfig()


@pytest.fixture
def feed_config() -> FeedConfig:
    return FeedConfig(symbols=["BTC", "ETH"], max_retries=2, backoff_base_sec=0.0)


@pytest.fixture
def telemetry_tmpdir(tmp_path_factory: pytest.TempPathFactory) -> Path:
    return tmp_path_factory.mktemp("telemetry")


class FakeBinanceApi:
    """Serve canned ticker/kline payloads through ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.tickers: Dict[str, List[Any]] = {}
        self.klines: Dict[str, Any] = {}
        self.requests: list[httpx.Request] = []

    def queue_prices(self, pair: str, *prices: Any) -> None:
        self.tickers.setdefault(pair, []).extend(prices)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        pair = request.url.params.get("symbol", "")
        if request.url.path == "/api/v3/ticker/24hr":
            queue = self.tickers.get(pair)
            if not queue:
                return httpx.Response(400, json={"code": -1121, "msg": "Invalid symbol."})
            price = queue.pop(0)
            return httpx.Response(
                200,
                json={
                    "symbol": pair,
                    "lastPrice": str(price),
                    "volume": "1234.5",
                    "priceChangePercent": "-1.25",
                },
            )
        if request.url.path == "/api/v3/klines":
            payload = self.klines.get(pair, [])
            if isinstance(payload, int):
                return httpx.Response(payload, text="boom")
            return httpx.Response(200, content=json.dumps(payload).encode("utf-8"))
        return httpx.Response(404, json={"code": -1, "msg": "Not found"})

    def session(self) -> httpx.Client:
        return httpx.Client(base_url="https://api.binance.test", transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake_binance() -> FakeBinanceApi:
    return FakeBinanceApi()


@pytest.fixture
def kline_row() -> Callable[[float], list]:
    def _row(close: float) -> list:
        return [1700000000000, "1.0", "2.0", "0.5", str(close), "10.0", 1700000299999, "10.0", 5, "1.0", "1.0", "0"]

    return _row
