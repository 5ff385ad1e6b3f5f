"""Data models for indicator results"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class SignalType(str, Enum):
    """Direction of a breakout signal."""
    NONE = "none"
    BUY = "buy"
    SELL = "sell"


class PatternType(str, Enum):
    """Chart patterns recognized over the column history."""
    NONE = "none"
    DOUBLE_TOP_BREAKOUT = "double_top_breakout"
    DOUBLE_BOTTOM_BREAKDOWN = "double_bottom_breakdown"
    TRIPLE_TOP_BREAKOUT = "triple_top_breakout"
    TRIPLE_BOTTOM_BREAKDOWN = "triple_bottom_breakdown"
    QUADRUPLE_TOP_BREAKOUT = "quadruple_top_breakout"
    QUADRUPLE_BOTTOM_BREAKDOWN = "quadruple_bottom_breakdown"
    ASCENDING_TRIPLE_TOP = "ascending_triple_top"
    DESCENDING_TRIPLE_BOTTOM = "descending_triple_bottom"
    BULLISH_CATAPULT = "bullish_catapult"
    BEARISH_CATAPULT = "bearish_catapult"
    BULLISH_SIGNAL_REVERSED = "bullish_signal_reversed"
    BEARISH_SIGNAL_REVERSED = "bearish_signal_reversed"
    BULLISH_TRIANGLE = "bullish_triangle"
    BEARISH_TRIANGLE = "bearish_triangle"
    LONG_TAIL_DOWN = "long_tail_down"
    HIGH_POLE = "high_pole"
    LOW_POLE = "low_pole"
    BULL_TRAP = "bull_trap"
    BEAR_TRAP = "bear_trap"
    SPREAD_TRIPLE_TOP = "spread_triple_top"
    SPREAD_TRIPLE_BOTTOM = "spread_triple_bottom"

    @property
    def display_name(self) -> str:
        """Human-readable name, e.g. 'Double Top Breakout'."""
        return self.value.replace("_", " ").title()


@dataclass(frozen=True)
class Signal:
    """A buy or sell signal at one column"""
    signal_type: SignalType
    column_index: int
    price: float
    timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class Pattern:
    """A recognized pattern spanning a range of columns"""
    pattern_type: PatternType
    start_column_index: int
    end_column_index: int
    price: float

    @property
    def name(self) -> str:
        return self.pattern_type.display_name


@dataclass
class SupportResistanceLevel:
    """A price level touched by one or more column extremes"""
    price: float
    is_support: bool
    first_column_index: int
    last_column_index: int = -1
    touch_count: int = 1

    def __post_init__(self):
        if self.last_column_index < 0:
            self.last_column_index = self.first_column_index

    def relative_distance(self, price: float) -> float:
        """Distance from price relative to this level."""
        return abs(price - self.price) / self.price


@dataclass(frozen=True)
class PriceObjective:
    """Vertical count target projected from one column"""
    target_price: float
    base_column_index: int
    extension_boxes: int
    is_bullish: bool
