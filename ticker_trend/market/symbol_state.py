"""Per-symbol storage for the trend classifier."""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterator, Tuple

from ticker_trend.core.enums import TrendState
from ticker_trend.core.types import Symbol


@dataclass(slots=True)
class SymbolState:
    """Rolling price window plus the last emitted state of one symbol.

    ``history`` is a bounded deque, so appending to a full window evicts the
    oldest price in O(1) and the order of the deque is always arrival order.
    """

    capacity: int
    history: Deque[float] = field(init=False)
    last_state: TrendState = TrendState.NEUTRAL

    def __post_init__(self) -> None:
        self.history = deque(maxlen=self.capacity)

    @property
    def is_full(self) -> bool:
        return len(self.history) == self.capacity

    def push(self, price: float) -> None:
        self.history.append(float(price))

    def snapshot(self) -> Tuple[float, ...]:
        return tuple(self.history)


class SymbolStateRegistry:
    """Explicit map from symbol to :class:`SymbolState`.

    The registry is owned by whichever component drives the tick loop and is
    handed to the classifier; states are created lazily on first use.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 2:
            raise ValueError("capacity must be >= 2")
        self._capacity = capacity
        self._states: Dict[Symbol, SymbolState] = {}

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, symbol: Symbol) -> SymbolState | None:
        return self._states.get(symbol)

    def get_or_create(self, symbol: Symbol) -> Tuple[SymbolState, bool]:
        """Return ``(state, created)`` for ``symbol``."""

        state = self._states.get(symbol)
        if state is not None:
            return state, False
        state = SymbolState(capacity=self._capacity)
        self._states[symbol] = state
        return state, True

    def symbols(self) -> Tuple[Symbol, ...]:
        return tuple(self._states)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._states

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(tuple(self._states))


__all__ = ["SymbolState", "SymbolStateRegistry"]
