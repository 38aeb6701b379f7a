from __future__ import annotations

import logging
import signal
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Tuple

import httpx

from ticker_trend.config.loader import resolve_config
from ticker_trend.config.models import MonitorConfig
from ticker_trend.core.enums import HistoryInterval, TrendState
from ticker_trend.core.errors import MarketDataError
from ticker_trend.core.types import Symbol
from ticker_trend.data_feed.binance_client import BinanceApiError, BinanceClient
from ticker_trend.market.symbol_state import SymbolStateRegistry
from ticker_trend.market.trend_classifier import TrendClassifier
from ticker_trend.telemetry import configure_logging
from ticker_trend.telemetry.sinks import EventSink, FanOutEventSink, LoggingEventSink, StorageEventSink
from ticker_trend.telemetry.storage import TelemetryStorage

FEED_ERRORS = (httpx.HTTPError, BinanceApiError, MarketDataError, ValueError)


@dataclass(slots=True, frozen=True)
class CoinUpdate:
    """Everything presentation needs for one symbol after a refresh cycle."""

    symbol: Symbol
    price: float
    volume: float
    change_24h_pct: float
    history: Tuple[float, ...]
    interval: HistoryInterval
    trend: TrendState


@dataclass(slots=True)
class TrendMonitor:
    """Poll tickers for all configured symbols and classify each new price.

    Every symbol is processed sequentially within :meth:`refresh`, so the
    classifier never sees interleaved calls for the same symbol.
    """

    client: BinanceClient
    classifier: TrendClassifier
    symbols: Iterable[str]
    logger: logging.Logger
    history_interval: HistoryInterval = HistoryInterval.MIN_5
    _symbols: Tuple[Symbol, ...] = field(init=False)
    _last_updates: Dict[Symbol, CoinUpdate] = field(init=False, default_factory=dict)

    def __post_init__(self) -> None:
        self._symbols = tuple(Symbol(item) for item in self.symbols)

    @property
    def last_updates(self) -> Dict[Symbol, CoinUpdate]:
        return dict(self._last_updates)

    def refresh(self) -> Dict[Symbol, CoinUpdate]:
        """Fetch, classify and return updates for the symbols that answered."""

        updates: Dict[Symbol, CoinUpdate] = {}
        for symbol in self._symbols:
            try:
                ticker = self.client.fetch_ticker(symbol)
            except FEED_ERRORS as exc:
                # The symbol's window does not advance this cycle.
                self.logger.warning("Dropping tick for %s: %s", symbol, exc)
                continue
            try:
                history = tuple(self.client.fetch_price_history(symbol, self.history_interval).data)
            except FEED_ERRORS as exc:
                self.logger.warning("Failed to fetch history for %s: %s", symbol, exc)
                history = tuple()

            trend = self.classifier.classify(symbol, ticker.data.price)
            update = CoinUpdate(
                symbol=symbol,
                price=float(ticker.data.price),
                volume=ticker.data.volume,
                change_24h_pct=ticker.data.change_24h_pct,
                history=history,
                interval=self.history_interval,
                trend=trend,
            )
            self.logger.debug(
                "Updated %s: price=%s, volume=%s, change=%s",
                symbol,
                update.price,
                update.volume,
                update.change_24h_pct,
                extra={"latency_ms": round(ticker.latency_ms, 3)},
            )
            updates[symbol] = update
            self._last_updates[symbol] = update
        return updates


def build_event_sink(config: MonitorConfig, telemetry_root: Path, logger: logging.Logger) -> EventSink:
    """Return the classifier event sink.

    State transitions always reach the log through the classifier's child
    logger; ``telemetry.record_events`` additionally appends every event to
    the daily events file.
    """

    log_sink = LoggingEventSink(logger.getChild("classifier"))
    if not config.telemetry.record_events:
        return log_sink
    storage = TelemetryStorage(logs_dir=telemetry_root)
    return FanOutEventSink(log_sink, StorageEventSink(storage))


def build_monitor(config: MonitorConfig, logger: logging.Logger, sink: EventSink | None = None) -> TrendMonitor:
    registry = SymbolStateRegistry(config.classifier.window_size)
    classifier = TrendClassifier(config.classifier, registry=registry, sink=sink)
    client = BinanceClient(config.feed)
    return TrendMonitor(
        client=client,
        classifier=classifier,
        symbols=config.feed.symbols,
        logger=logger.getChild("monitor"),
        history_interval=config.feed.history_interval,
    )


def main() -> None:
    project_root = Path(__file__).resolve().parents[1]
    config = resolve_config(project_root / "config")

    telemetry_root = (project_root / config.telemetry.logs_dir).resolve()
    logger = configure_logging(log_dir=telemetry_root, level=config.telemetry.log_level)
    logger.info("Starting trend monitor", extra={"symbols": list(config.feed.symbols)})

    sink = build_event_sink(config, telemetry_root, logger)
    monitor = build_monitor(config, logger, sink)

    stop_event = False

    def _request_stop(signum: int, _: object) -> None:
        nonlocal stop_event
        logger.info("Received signal", extra={"signal": signum})
        stop_event = True

    signal.signal(signal.SIGINT, _request_stop)
    signal.signal(signal.SIGTERM, _request_stop)

    update_interval = config.feed.update_interval_sec
    try:
        while not stop_event:
            loop_start = time.perf_counter()
            updates = monitor.refresh()
            if updates:
                logger.info(
                    "Cycle complete",
                    extra={"trends": {str(symbol): update.trend.value for symbol, update in updates.items()}},
                )
            loop_duration = time.perf_counter() - loop_start
            time.sleep(max(0.0, update_interval - loop_duration))
    except KeyboardInterrupt:  # pragma: no cover - manual exit
        logger.info("Interrupted by user")
    finally:
        monitor.client.close()
        logger.info("Shutdown complete")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - top-level safety
        print(f"Fatal error: {exc}", file=sys.stderr)
        raise
