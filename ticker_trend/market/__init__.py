"""Trend classification package.

Holds the per-symbol price windows and the classifier that turns them into
debounced trend states.
"""

from .symbol_state import SymbolState, SymbolStateRegistry
from .trend_classifier import TrendClassifier, WindowStats, candidate_state, evaluate_window

__all__ = [
    "SymbolState",
    "SymbolStateRegistry",
    "TrendClassifier",
    "WindowStats",
    "candidate_state",
    "evaluate_window",
]
