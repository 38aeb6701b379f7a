"""Parsing and sanitizing Binance 24h tickers and klines."""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, List, Mapping, Sequence

from ticker_trend.core.enums import HistoryInterval
from ticker_trend.core.errors import MarketDataError
from ticker_trend.core.types import Price, Symbol


@dataclass(slots=True, frozen=True)
class HistoryWindow:
    """How far back and how many klines to request for a sparkline."""

    lookback: timedelta
    limit: int


HISTORY_WINDOWS: Mapping[HistoryInterval, HistoryWindow] = {
    HistoryInterval.MIN_5: HistoryWindow(timedelta(hours=12), 144),
    HistoryInterval.MIN_15: HistoryWindow(timedelta(hours=36), 144),
    HistoryInterval.MIN_30: HistoryWindow(timedelta(hours=72), 144),
    HistoryInterval.HOUR_1: HistoryWindow(timedelta(hours=144), 144),
    HistoryInterval.DAY_1: HistoryWindow(timedelta(days=30), 30),
}


@dataclass(slots=True, frozen=True)
class TickerSnapshot:
    """Sanitized 24h ticker for one base asset."""

    symbol: Symbol
    price: Price
    volume: float
    change_24h_pct: float


def pair_symbol(symbol: Symbol | str, quote_asset: str) -> str:
    """Return the exchange pair name, e.g. ``BTC`` + ``USDT`` -> ``BTCUSDT``."""

    return f"{str(symbol).upper()}{quote_asset.upper()}"


def _to_float(value: Any, default: float = 0.0) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def parse_ticker_response(symbol: Symbol, payload: Mapping[str, Any] | None) -> TickerSnapshot:
    """Convert a ``/api/v3/ticker/24hr`` payload into :class:`TickerSnapshot`.

    The price must be a finite positive number, otherwise the tick is rejected
    with :class:`MarketDataError` so it never reaches the classifier. Volume
    and 24h change are informational and fall back to ``0.0``.
    """

    if not isinstance(payload, Mapping) or not payload:
        raise MarketDataError(f"Empty ticker payload for {symbol}")
    raw_price = payload.get("lastPrice")
    try:
        price = float(raw_price)
    except (TypeError, ValueError) as exc:
        raise MarketDataError(f"Unparseable price for {symbol}: {raw_price!r}") from exc
    if not math.isfinite(price) or price <= 0:
        raise MarketDataError(f"Invalid price for {symbol}: {raw_price!r}")
    return TickerSnapshot(
        symbol=symbol,
        price=Price(price),
        volume=_to_float(payload.get("volume")),
        change_24h_pct=_to_float(payload.get("priceChangePercent")),
    )


def parse_kline_closes(payload: Sequence[Any] | None) -> List[float]:
    """Extract close prices from a ``/api/v3/klines`` payload.

    Binance returns rows ``[openTime, open, high, low, close, volume, ...]``;
    rows that are too short or carry an invalid close are skipped.
    """

    if not payload:
        return []
    closes: List[float] = []
    for row in payload:
        if not isinstance(row, Sequence) or isinstance(row, str) or len(row) <= 4:
            continue
        close = _to_float(row[4], default=math.nan)
        if math.isnan(close):
            continue
        closes.append(close)
    return closes


__all__ = [
    "HISTORY_WINDOWS",
    "HistoryWindow",
    "TickerSnapshot",
    "pair_symbol",
    "parse_kline_closes",
    "parse_ticker_response",
]
