"""Short-term trend classification with volatility-normalized thresholds.

Every tick of a symbol is appended to a rolling window. Once the window is
full, its consecutive moves are reduced to two signals:

* movement quality: ``|sum_up - sum_down| / avg_move``, i.e. how many average
  moves the net displacement is worth;
* momentum: how many of the moves point up or down.

Movement quality must clear a threshold that grows with the window's
volatility (largest move relative to the average move), and momentum must clear
a count gate. The resulting candidate goes through hysteresis: leaving the
current state requires the quality to beat the *current* state's bar by
``hysteresis_buffer``, which keeps the emitted state from flickering around a
boundary.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from ticker_trend.config.models import ClassifierConfig
from ticker_trend.core.enums import TrendState
from ticker_trend.core.errors import TelemetryError
from ticker_trend.core.time_utils import now_utc
from ticker_trend.core.types import NumericSequence, Symbol
from ticker_trend.market.symbol_state import SymbolStateRegistry
from ticker_trend.telemetry.events import TelemetryEvent
from ticker_trend.telemetry.sinks import EventSink

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class WindowStats:
    """Statistics of one full price window."""

    sum_up: float
    sum_down: float
    total_move: float
    max_move: float
    avg_move: float
    volatility: float
    threshold: float
    net_move: float
    movement_quality: float
    up_moves: int
    down_moves: int
    up_momentum: float
    down_momentum: float
    directions: Tuple[int, ...]

    @property
    def is_flat(self) -> bool:
        return self.avg_move == 0

    def to_payload(self) -> Dict[str, Any]:
        return {
            "sum_up": self.sum_up,
            "sum_down": self.sum_down,
            "net_move": self.net_move,
            "total_move": self.total_move,
            "max_move": self.max_move,
            "avg_move": self.avg_move,
            "volatility": self.volatility,
            "threshold": self.threshold,
            "movement_quality": self.movement_quality,
            "up_moves": self.up_moves,
            "down_moves": self.down_moves,
            "up_momentum": self.up_momentum,
            "down_momentum": self.down_momentum,
        }


def evaluate_window(prices: NumericSequence, config: ClassifierConfig) -> WindowStats:
    """Reduce ``prices`` (oldest first) to movement and momentum statistics.

    Momentum fractions are expressed relative to ``config.window_size``, not
    to the number of moves.
    """

    values = [float(price) for price in prices]
    if len(values) < 2:
        raise ValueError("at least two prices are required")

    sum_up = 0.0
    sum_down = 0.0
    total_move = 0.0
    max_move = 0.0
    directions: list[int] = []
    for previous, current in zip(values, values[1:]):
        move = current - previous
        abs_move = abs(move)
        if move > 0:
            sum_up += abs_move
            directions.append(1)
        elif move < 0:
            sum_down += abs_move
            directions.append(-1)
        else:
            directions.append(0)
        total_move += abs_move
        max_move = max(max_move, abs_move)

    avg_move = total_move / len(directions)
    net_move = sum_up - sum_down
    if avg_move == 0:
        volatility = 0.0
        movement_quality = 0.0
    else:
        volatility = min(max_move / avg_move, config.volatility_cap)
        movement_quality = abs(net_move) / avg_move
    threshold = config.base_threshold + volatility * config.volatility_multiplier

    up_moves = directions.count(1)
    down_moves = directions.count(-1)
    return WindowStats(
        sum_up=sum_up,
        sum_down=sum_down,
        total_move=total_move,
        max_move=max_move,
        avg_move=avg_move,
        volatility=volatility,
        threshold=threshold,
        net_move=net_move,
        movement_quality=movement_quality,
        up_moves=up_moves,
        down_moves=down_moves,
        up_momentum=up_moves / config.window_size,
        down_momentum=down_moves / config.window_size,
        directions=tuple(directions),
    )


def candidate_state(stats: WindowStats, config: ClassifierConfig) -> TrendState:
    """Map window statistics to a state before hysteresis (strong beats slight)."""

    quality = stats.movement_quality
    strong_bar = stats.threshold
    slight_bar = stats.threshold * config.slight_factor
    if quality > strong_bar and stats.up_moves >= config.momentum_strong:
        return TrendState.STRONG_UP
    if quality > strong_bar and stats.down_moves >= config.momentum_strong:
        return TrendState.STRONG_DOWN
    if quality > slight_bar and stats.up_moves >= config.momentum_slight:
        return TrendState.SLIGHT_UP
    if quality > slight_bar and stats.down_moves >= config.momentum_slight:
        return TrendState.SLIGHT_DOWN
    return TrendState.NEUTRAL


def required_quality(last_state: TrendState, stats: WindowStats, config: ClassifierConfig) -> float:
    """Movement quality needed to move away from ``last_state``."""

    effective = stats.threshold if last_state.is_strong else stats.threshold * config.slight_factor
    return effective * (1 + config.hysteresis_buffer)


class TrendClassifier:
    """Classify per-symbol price ticks into debounced :class:`TrendState` values.

    ``registry`` holds the per-symbol windows; pass one in when the owner of
    the tick loop needs to inspect or share it, otherwise a private registry is
    created. ``sink`` receives structured diagnostics and may be omitted.

    Calls for one symbol must not interleave; distinct symbols are independent.
    """

    def __init__(
        self,
        config: ClassifierConfig | None = None,
        *,
        registry: SymbolStateRegistry | None = None,
        sink: EventSink | None = None,
    ) -> None:
        self._config = config or ClassifierConfig()
        if registry is None:
            registry = SymbolStateRegistry(self._config.window_size)
        elif registry.capacity != self._config.window_size:
            raise ValueError(
                f"registry capacity {registry.capacity} does not match window_size {self._config.window_size}"
            )
        self._registry = registry
        self._sink = sink

    @property
    def config(self) -> ClassifierConfig:
        return self._config

    def classify(self, symbol: Symbol, price: float) -> TrendState:
        """Record ``price`` for ``symbol`` and return the state to display.

        Diagnostics are published only after the window and ``last_state`` are
        updated; a sink raising :class:`TelemetryError` does not fail the tick.
        """

        state, created = self._registry.get_or_create(symbol)
        state.push(price)
        events: List[Tuple[str, Dict[str, Any]]] = []
        if created:
            events.append(("trend.history_created", {"capacity": state.capacity}))

        if not state.is_full:
            events.append(
                ("trend.insufficient_history", {"current": len(state.history), "required": state.capacity})
            )
            self._publish(symbol, events)
            return TrendState.NEUTRAL

        stats = evaluate_window(state.history, self._config)
        previous = state.last_state
        candidate = candidate_state(stats, self._config)
        events.append(
            (
                "trend.window_analyzed",
                {**stats.to_payload(), "last_state": previous.value, "candidate": candidate.value},
            )
        )

        emitted = candidate
        if stats.is_flat:
            # A window without any movement carries no trend evidence at all.
            emitted = TrendState.NEUTRAL
        elif candidate != previous:
            required = required_quality(previous, stats, self._config)
            if stats.movement_quality < required:
                events.append(
                    (
                        "trend.hysteresis_hold",
                        {
                            "required_quality": required,
                            "movement_quality": stats.movement_quality,
                            "last_state": previous.value,
                            "candidate": candidate.value,
                        },
                    )
                )
                emitted = previous

        state.last_state = emitted
        if emitted != previous:
            events.append(("trend.state_changed", {"previous": previous.value, "state": emitted.value}))
        self._publish(symbol, events)
        return emitted

    def current(self, symbol: Symbol) -> TrendState:
        """Return the last emitted state for ``symbol`` without touching it."""

        state = self._registry.get(symbol)
        return state.last_state if state else TrendState.NEUTRAL

    def history(self, symbol: Symbol) -> Tuple[float, ...]:
        """Return a copy of the current price window for ``symbol``."""

        state = self._registry.get(symbol)
        return state.snapshot() if state else tuple()

    def _publish(self, symbol: Symbol, events: List[Tuple[str, Dict[str, Any]]]) -> None:
        if self._sink is None:
            return
        for event_type, payload in events:
            level = "INFO" if event_type == "trend.state_changed" else "DEBUG"
            event = TelemetryEvent(
                timestamp=now_utc(),
                event_type=event_type,
                level=level,
                payload=payload,
                context={"symbol": str(symbol)},
            )
            try:
                self._sink.emit(event)
            except TelemetryError as exc:
                LOGGER.warning("Dropping %s event for %s: %s", event_type, symbol, exc)


__all__ = [
    "TrendClassifier",
    "WindowStats",
    "candidate_state",
    "evaluate_window",
    "required_quality",
]
