"""
Trend line manager.

Invoked once per newly appended column. Checks the active line for a break
or touch against the new column's extreme, then on an X/O alternation forms
a new line from the most recent significant low or high when no line is
active. At most one line is active; broken lines stay in history.
"""

from typing import Optional, Sequence

from ..chart.models import Column, ColumnType
from ..logging.config import get_trendline_logger, log_trendline_event
from .models import TrendLine, TrendLineType

logger = get_trendline_logger(__name__)

# Preceding columns a significant low/high must not be exceeded by
SIGNIFICANCE_LOOKBACK = 3


class TrendLineManager:
    """Owns all trend lines of one chart and tracks the active one."""

    def __init__(self, box_size: float = 0.0):
        self.box_size = box_size
        self.trend_lines: list[TrendLine] = []
        self._active_index: Optional[int] = None

    @property
    def active_trend_line(self) -> Optional[TrendLine]:
        """Most recently formed line, whether or not it has since broken."""
        if self._active_index is None:
            return None
        return self.trend_lines[self._active_index]

    def _has_active_line(self) -> bool:
        line = self.active_trend_line
        return line is not None and line.is_active

    def update_trend_lines(self, columns: Sequence[Column], new_column_index: int,
                           box_size: Optional[float] = None) -> None:
        """Process a newly appended column."""
        if box_size is not None:
            self.box_size = box_size

        self.check_trend_line_break(columns, new_column_index)
        self.process_new_column(columns, new_column_index)

    def check_trend_line_break(self, columns: Sequence[Column], column_index: int) -> None:
        if not self._has_active_line():
            return

        if column_index < 0 or column_index >= len(columns):
            return

        line = self.active_trend_line
        column = columns[column_index]
        price = column.lowest_price if line.is_support else column.highest_price

        if line.is_broken(column_index, price):
            line.is_active = False
            log_trendline_event(
                logger,
                action="broken",
                line_type=line.line_type.value,
                column_index=column_index,
                context={
                    "price": price,
                    "line_price": line.price_at_column(column_index),
                    "touch_count": line.touch_count,
                }
            )
            return

        if line.test_trend_line(column_index, price):
            log_trendline_event(
                logger,
                action="touched",
                line_type=line.line_type.value,
                column_index=column_index,
                context={"price": price, "touch_count": line.touch_count}
            )

        line.update_end_point(column_index, line.price_at_column(column_index))

    def process_new_column(self, columns: Sequence[Column], column_index: int) -> None:
        if column_index < 1 or column_index >= len(columns):
            return

        current_type = columns[column_index].column_type
        previous_type = columns[column_index - 1].column_type

        if self._has_active_line():
            return

        if current_type == ColumnType.X and previous_type == ColumnType.O:
            anchor = self.find_significant_low(columns, column_index - 1)
            if anchor >= 0:
                self._form_line(TrendLineType.BULLISH_SUPPORT, columns, anchor, column_index)

        elif current_type == ColumnType.O and previous_type == ColumnType.X:
            anchor = self.find_significant_high(columns, column_index - 1)
            if anchor >= 0:
                self._form_line(TrendLineType.BEARISH_RESISTANCE, columns, anchor, column_index)

    def _form_line(self, line_type: TrendLineType, columns: Sequence[Column],
                   anchor_index: int, trigger_index: int) -> TrendLine:
        column = columns[anchor_index]
        if line_type == TrendLineType.BULLISH_SUPPORT:
            price = column.lowest_price
        else:
            price = column.highest_price

        box_index = next(
            (i for i, box in enumerate(column.boxes) if box.price == price), 0
        )
        line = TrendLine(line_type, anchor_index, price, box_index, self.box_size)
        line.update_end_point(trigger_index, line.price_at_column(trigger_index))

        self.trend_lines.append(line)
        self._active_index = len(self.trend_lines) - 1

        log_trendline_event(
            logger,
            action="formed",
            line_type=line_type.value,
            column_index=trigger_index,
            context={
                "anchor_column": anchor_index,
                "anchor_price": price,
                "box_size": self.box_size,
            }
        )
        return line

    @staticmethod
    def is_significant_low(columns: Sequence[Column], column_index: int) -> bool:
        """O column below the prior X column's high and lowest of its lookback."""
        if column_index < 1:
            return False

        column = columns[column_index]
        if column.column_type != ColumnType.O:
            return False

        previous = columns[column_index - 1]
        if previous.column_type != ColumnType.X:
            return False

        current_low = column.lowest_price
        if current_low >= previous.highest_price:
            return False

        lookback = min(SIGNIFICANCE_LOOKBACK, column_index)
        return all(
            columns[column_index - i].lowest_price >= current_low
            for i in range(1, lookback + 1)
        )

    @staticmethod
    def is_significant_high(columns: Sequence[Column], column_index: int) -> bool:
        """X column above the prior O column's low and highest of its lookback."""
        if column_index < 1:
            return False

        column = columns[column_index]
        if column.column_type != ColumnType.X:
            return False

        previous = columns[column_index - 1]
        if previous.column_type != ColumnType.O:
            return False

        current_high = column.highest_price
        if current_high <= previous.lowest_price:
            return False

        lookback = min(SIGNIFICANCE_LOOKBACK, column_index)
        return all(
            columns[column_index - i].highest_price <= current_high
            for i in range(1, lookback + 1)
        )

    @classmethod
    def find_significant_low(cls, columns: Sequence[Column], from_column: int) -> int:
        """Most recent significant low at or before from_column, -1 if none."""
        for i in range(from_column, -1, -1):
            if cls.is_significant_low(columns, i):
                return i
        return -1

    @classmethod
    def find_significant_high(cls, columns: Sequence[Column], from_column: int) -> int:
        """Most recent significant high at or before from_column, -1 if none."""
        for i in range(from_column, -1, -1):
            if cls.is_significant_high(columns, i):
                return i
        return -1

    def is_above_bullish_support(self, column_index: int, price: float) -> bool:
        if not self.has_bullish_bias():
            return False
        return price > self.active_trend_line.price_at_column(column_index)

    def is_below_bearish_resistance(self, column_index: int, price: float) -> bool:
        if not self.has_bearish_bias():
            return False
        return price < self.active_trend_line.price_at_column(column_index)

    def has_bullish_bias(self) -> bool:
        return (self._has_active_line() and
                self.active_trend_line.line_type == TrendLineType.BULLISH_SUPPORT)

    def has_bearish_bias(self) -> bool:
        return (self._has_active_line() and
                self.active_trend_line.line_type == TrendLineType.BEARISH_RESISTANCE)

    def clear(self) -> None:
        self.trend_lines.clear()
        self._active_index = None

    def __str__(self) -> str:
        line = self.active_trend_line
        if self.has_bullish_bias():
            bias = "Bullish"
        elif self.has_bearish_bias():
            bias = "Bearish"
        else:
            bias = "None"
        return (
            f"P&F Trendline Manager - Total Lines: {len(self.trend_lines)}\n"
            f"Active: {line if line is not None else 'None'}\n"
            f"Bias: {bias}"
        )
