"""
Trend line data models.

A trend line is a 45-degree projection anchored at a significant low (rising
support) or high (falling resistance): one box size per column.
"""

from dataclasses import dataclass
from enum import Enum


class TrendLineType(str, Enum):
    """Kind of trend line."""
    BULLISH_SUPPORT = "bullish_support"
    BEARISH_RESISTANCE = "bearish_resistance"


@dataclass(frozen=True)
class TrendLinePoint:
    """Anchor or end point of a trend line."""
    column_index: int
    price: float
    box_index: int = 0


class TrendLine:
    """A single support or resistance line with touch tracking."""

    def __init__(self, line_type: TrendLineType, start_column_index: int,
                 start_price: float, start_box_index: int, box_size: float):
        self.line_type = line_type
        self.start_point = TrendLinePoint(start_column_index, start_price, start_box_index)
        self.end_point = self.start_point
        self.box_size = box_size
        self.is_active = True
        self.was_touched = False
        self.touch_count = 0

    @property
    def is_support(self) -> bool:
        return self.line_type == TrendLineType.BULLISH_SUPPORT

    def price_at_column(self, column_index: int) -> float:
        """Projected price; rises for support, falls for resistance."""
        offset = (column_index - self.start_point.column_index) * self.box_size
        if self.is_support:
            return self.start_point.price + offset
        return self.start_point.price - offset

    def update_end_point(self, column_index: int, price: float, box_index: int = 0) -> None:
        self.end_point = TrendLinePoint(column_index, price, box_index)

    def is_broken(self, column_index: int, price: float) -> bool:
        """True if price closes more than one box beyond the line."""
        if not self.is_active or column_index <= self.start_point.column_index:
            return False

        line_price = self.price_at_column(column_index)
        if self.is_support:
            return price < line_price - self.box_size
        return price > line_price + self.box_size

    def test_trend_line(self, column_index: int, price: float) -> bool:
        """Record a touch when price is within half a box of the line."""
        if not self.is_active or column_index <= self.start_point.column_index:
            return False

        if abs(price - self.price_at_column(column_index)) < self.box_size * 0.5:
            self.was_touched = True
            self.touch_count += 1
            return True
        return False

    def __str__(self) -> str:
        label = "Bullish Support" if self.is_support else "Bearish Resistance"
        return (
            f"{label} Line: Start(Col:{self.start_point.column_index}, "
            f"Price:{self.start_point.price:.5f}) "
            f"Active:{'Yes' if self.is_active else 'No'} "
            f"Touched:{self.touch_count} times"
        )
