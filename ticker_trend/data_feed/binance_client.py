"""Binance REST client for the tickers that feed the trend classifier.

The client covers the two public endpoints the monitor needs:

* ``GET /api/v3/ticker/24hr`` for last price, 24h volume and 24h change;
* ``GET /api/v3/klines`` for the close-price history shown as a sparkline.

Latency is recorded for every call as ``(response_time - request_time)`` in
milliseconds and returned next to the parsed data.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, TypeVar

import httpx

from ticker_trend.config.models import FeedConfig
from ticker_trend.core.enums import HistoryInterval
from ticker_trend.core.time_utils import now_utc, to_unix_millis
from ticker_trend.core.types import Symbol

from .tickers import HISTORY_WINDOWS, TickerSnapshot, pair_symbol, parse_kline_closes, parse_ticker_response

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

# Binance answers 429 when throttling and 418 once an IP is banned for ignoring it.
RATE_LIMIT_STATUSES = frozenset({418, 429})


class BinanceApiError(RuntimeError):
    """Raised when Binance answers with an error body (``code``/``msg``)."""

    def __init__(self, code: int, message: str, payload: Mapping[str, Any], status_code: int = 200):
        super().__init__(f"Binance error {code}: {message}")
        self.code = code
        self.payload = payload
        self.status_code = status_code

    @property
    def is_permanent(self) -> bool:
        """Client errors other than rate limiting will not succeed on retry."""

        return 400 <= self.status_code < 500 and self.status_code not in RATE_LIMIT_STATUSES


@dataclass(slots=True)
class DataWithLatency(Generic[T]):
    """Container used by fetch helpers to propagate measured latency."""

    data: T
    latency_ms: float


class BinanceClient:
    """Synchronous REST client for Binance spot market data.

    Parameters
    ----------
    feed_config:
        :class:`ticker_trend.config.models.FeedConfig` with endpoint, quote
        asset, timeout and retry policy.
    session:
        Optional pre-configured :class:`httpx.Client` (e.g. for tests).

    Notes
    -----
    Retries use exponential backoff ``backoff_base_sec * 2 ** attempt``.
    Temporary HTTP/network issues are logged as warnings and re-raised after
    the final attempt. Binance 4xx error bodies (e.g. ``-1121 Invalid
    symbol``) are raised immediately, except for rate limiting.
    """

    def __init__(
        self,
        feed_config: FeedConfig,
        session: httpx.Client | None = None,
        *,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self._quote_asset = feed_config.quote_asset
        self._client = session or httpx.Client(
            base_url=feed_config.rest_endpoint,
            timeout=feed_config.request_timeout_sec,
        )
        self._max_retries = feed_config.max_retries
        self._backoff_base = feed_config.backoff_base_sec
        self._clock = clock

    def close(self) -> None:
        """Close the underlying HTTP client."""

        self._client.close()

    def __enter__(self) -> "BinanceClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _request(self, path: str, *, params: Optional[Mapping[str, Any]] = None) -> tuple[Any, float]:
        """Perform a GET with retry/backoff and return ``(json, latency_ms)``."""

        url_path = path if path.startswith("/") else f"/{path}"
        attempt = 0
        last_error: Exception | None = None
        while attempt < self._max_retries:
            start = time.perf_counter()
            try:
                response = self._client.get(url_path, params=dict(params or {}))
                latency_ms = (time.perf_counter() - start) * 1_000.0
                payload = response.json() if response.content else None
                if isinstance(payload, Mapping) and "code" in payload and "msg" in payload:
                    raise BinanceApiError(
                        int(payload["code"]), str(payload["msg"]), payload, status_code=response.status_code
                    )
                response.raise_for_status()
                return payload, latency_ms
            except (httpx.HTTPError, ValueError, BinanceApiError) as exc:
                last_error = exc
                LOGGER.warning(
                    "Binance GET %s failed (attempt %s/%s): %s", path, attempt + 1, self._max_retries, exc
                )
                if isinstance(exc, BinanceApiError) and exc.is_permanent:
                    raise
                attempt += 1
                if attempt < self._max_retries:
                    time.sleep(self._backoff_base * (2 ** (attempt - 1)))
        assert last_error is not None
        raise last_error

    def fetch_ticker(self, symbol: Symbol) -> DataWithLatency[TickerSnapshot]:
        """Return the sanitized 24h ticker for ``symbol`` (base asset, e.g. ``BTC``).

        Raises :class:`ticker_trend.core.errors.MarketDataError` when the price
        in the response is unusable.
        """

        params = {"symbol": pair_symbol(symbol, self._quote_asset)}
        payload, latency = self._request("/api/v3/ticker/24hr", params=params)
        snapshot = parse_ticker_response(symbol, payload)
        return DataWithLatency(snapshot, latency)

    def fetch_price_history(
        self,
        symbol: Symbol,
        interval: HistoryInterval,
    ) -> DataWithLatency[List[float]]:
        """Return close prices for ``symbol`` over the interval's lookback window."""

        window = HISTORY_WINDOWS[interval]
        end_time: datetime = self._clock()
        start_time = end_time - window.lookback
        params: Dict[str, Any] = {
            "symbol": pair_symbol(symbol, self._quote_asset),
            "interval": interval.value,
            "startTime": to_unix_millis(start_time),
            "endTime": to_unix_millis(end_time),
            "limit": window.limit,
        }
        payload, latency = self._request("/api/v3/klines", params=params)
        return DataWithLatency(parse_kline_closes(payload), latency)


__all__ = ["BinanceApiError", "BinanceClient", "DataWithLatency"]
