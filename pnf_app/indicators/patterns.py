"""
Chart pattern recognition.

Each call to detect_patterns rescans the whole column history. At every
column index the detectors run in a fixed order and each one that fires
appends a Pattern. The catapult detectors read the patterns appended so far,
so the order is part of the behavior.
"""

from typing import Callable, Optional

from ..chart.construction import PointAndFigureChart
from ..chart.models import ColumnType
from ..models.indicators import Pattern, PatternType
from .signals import previous_column_of_type

# Two extremes closer than this are treated as the same price level
PRICE_TOLERANCE = 0.0001

# Minimum O column length preceding a long-tail-down reversal
LONG_TAIL_MIN_BOXES = 20

# High/low pole: minimum move in boxes and minimum retracement of that move
POLE_MIN_BOXES = 3
POLE_MIN_RETRACEMENT = 0.5

# Columns spanned by triangles and signal-reversed formations
FORMATION_SPAN = 5

BULLISH_PATTERNS = frozenset({
    PatternType.DOUBLE_TOP_BREAKOUT,
    PatternType.TRIPLE_TOP_BREAKOUT,
    PatternType.QUADRUPLE_TOP_BREAKOUT,
    PatternType.ASCENDING_TRIPLE_TOP,
    PatternType.BULLISH_CATAPULT,
    PatternType.BULLISH_SIGNAL_REVERSED,
    PatternType.BULLISH_TRIANGLE,
    PatternType.LONG_TAIL_DOWN,
    PatternType.LOW_POLE,
    PatternType.BEAR_TRAP,
    PatternType.SPREAD_TRIPLE_TOP,
})

BEARISH_PATTERNS = frozenset({
    PatternType.DOUBLE_BOTTOM_BREAKDOWN,
    PatternType.TRIPLE_BOTTOM_BREAKDOWN,
    PatternType.QUADRUPLE_BOTTOM_BREAKDOWN,
    PatternType.DESCENDING_TRIPLE_BOTTOM,
    PatternType.BEARISH_CATAPULT,
    PatternType.BEARISH_SIGNAL_REVERSED,
    PatternType.BEARISH_TRIANGLE,
    PatternType.HIGH_POLE,
    PatternType.BULL_TRAP,
    PatternType.SPREAD_TRIPLE_BOTTOM,
})


def is_bullish_pattern(pattern_type: PatternType) -> bool:
    return pattern_type in BULLISH_PATTERNS


def is_bearish_pattern(pattern_type: PatternType) -> bool:
    return pattern_type in BEARISH_PATTERNS


def pattern_type_to_string(pattern_type: PatternType) -> str:
    return pattern_type.display_name


def _same_price(a: float, b: float) -> bool:
    return abs(a - b) < PRICE_TOLERANCE


def recent_columns_of_type(chart: PointAndFigureChart, from_index: int,
                           column_type: ColumnType, limit: Optional[int] = None) -> list[int]:
    """Indices of columns of column_type at or before from_index, most recent first."""
    indices = []
    for i in range(from_index, -1, -1):
        if limit is not None and len(indices) >= limit:
            break
        if chart.get_column(i).column_type == column_type:
            indices.append(i)
    return indices


class PnFPatternRecognizer:
    """Recognizes twenty-one point-and-figure chart patterns."""

    def __init__(self):
        self._patterns: list[Pattern] = []
        self._detectors: list[Callable[[PointAndFigureChart, int], Optional[Pattern]]] = [
            self.detect_double_top_breakout,
            self.detect_double_bottom_breakdown,
            self.detect_triple_top_breakout,
            self.detect_triple_bottom_breakdown,
            self.detect_quadruple_top_breakout,
            self.detect_quadruple_bottom_breakdown,
            self.detect_ascending_triple_top,
            self.detect_descending_triple_bottom,
            self.detect_bullish_catapult,
            self.detect_bearish_catapult,
            self.detect_bullish_signal_reversed,
            self.detect_bearish_signal_reversed,
            self.detect_bullish_triangle,
            self.detect_bearish_triangle,
            self.detect_long_tail_down,
            self.detect_high_pole,
            self.detect_low_pole,
            self.detect_bull_trap,
            self.detect_bear_trap,
            self.detect_spread_triple_top,
            self.detect_spread_triple_bottom,
        ]

    def detect_patterns(self, chart: PointAndFigureChart) -> None:
        self._patterns = []
        for i in range(chart.column_count):
            for detector in self._detectors:
                pattern = detector(chart, i)
                if pattern is not None:
                    self._patterns.append(pattern)

    # Breakouts

    def detect_double_top_breakout(self, chart: PointAndFigureChart, i: int) -> Optional[Pattern]:
        if i < 2:
            return None
        column = chart.get_column(i)
        if column.column_type != ColumnType.X:
            return None
        previous = previous_column_of_type(chart, i, ColumnType.X)
        if previous == -1:
            return None
        if column.highest_price > chart.get_column(previous).highest_price:
            return Pattern(PatternType.DOUBLE_TOP_BREAKOUT, previous, i, column.highest_price)
        return None

    def detect_double_bottom_breakdown(self, chart: PointAndFigureChart, i: int) -> Optional[Pattern]:
        if i < 2:
            return None
        column = chart.get_column(i)
        if column.column_type != ColumnType.O:
            return None
        previous = previous_column_of_type(chart, i, ColumnType.O)
        if previous == -1:
            return None
        if column.lowest_price < chart.get_column(previous).lowest_price:
            return Pattern(PatternType.DOUBLE_BOTTOM_BREAKDOWN, previous, i, column.lowest_price)
        return None

    def detect_triple_top_breakout(self, chart: PointAndFigureChart, i: int) -> Optional[Pattern]:
        """Current X column clears two prior X columns topping at the same price."""
        if i < 4 or chart.get_column(i).column_type != ColumnType.X:
            return None
        tops = recent_columns_of_type(chart, i, ColumnType.X, 3)
        if len(tops) < 3:
            return None
        high0, high1, high2 = (chart.get_column(t).highest_price for t in tops)
        if _same_price(high1, high2) and high0 > high1:
            return Pattern(PatternType.TRIPLE_TOP_BREAKOUT, tops[2], i, high0)
        return None

    def detect_triple_bottom_breakdown(self, chart: PointAndFigureChart, i: int) -> Optional[Pattern]:
        if i < 4 or chart.get_column(i).column_type != ColumnType.O:
            return None
        bottoms = recent_columns_of_type(chart, i, ColumnType.O, 3)
        if len(bottoms) < 3:
            return None
        low0, low1, low2 = (chart.get_column(b).lowest_price for b in bottoms)
        if _same_price(low1, low2) and low0 < low1:
            return Pattern(PatternType.TRIPLE_BOTTOM_BREAKDOWN, bottoms[2], i, low0)
        return None

    def detect_quadruple_top_breakout(self, chart: PointAndFigureChart, i: int) -> Optional[Pattern]:
        if i < 6 or chart.get_column(i).column_type != ColumnType.X:
            return None
        tops = recent_columns_of_type(chart, i, ColumnType.X, 4)
        if len(tops) < 4:
            return None
        high0, high1, high2, high3 = (chart.get_column(t).highest_price for t in tops)
        if _same_price(high1, high2) and _same_price(high2, high3) and high0 > high1:
            return Pattern(PatternType.QUADRUPLE_TOP_BREAKOUT, tops[3], i, high0)
        return None

    def detect_quadruple_bottom_breakdown(self, chart: PointAndFigureChart, i: int) -> Optional[Pattern]:
        if i < 6 or chart.get_column(i).column_type != ColumnType.O:
            return None
        bottoms = recent_columns_of_type(chart, i, ColumnType.O, 4)
        if len(bottoms) < 4:
            return None
        low0, low1, low2, low3 = (chart.get_column(b).lowest_price for b in bottoms)
        if _same_price(low1, low2) and _same_price(low2, low3) and low0 < low1:
            return Pattern(PatternType.QUADRUPLE_BOTTOM_BREAKDOWN, bottoms[3], i, low0)
        return None

    def detect_ascending_triple_top(self, chart: PointAndFigureChart, i: int) -> Optional[Pattern]:
        if i < 4 or chart.get_column(i).column_type != ColumnType.X:
            return None
        tops = recent_columns_of_type(chart, i, ColumnType.X, 3)
        if len(tops) < 3:
            return None
        high0, high1, high2 = (chart.get_column(t).highest_price for t in tops)
        if high0 > high1 > high2:
            return Pattern(PatternType.ASCENDING_TRIPLE_TOP, tops[2], i, high0)
        return None

    def detect_descending_triple_bottom(self, chart: PointAndFigureChart, i: int) -> Optional[Pattern]:
        if i < 4 or chart.get_column(i).column_type != ColumnType.O:
            return None
        bottoms = recent_columns_of_type(chart, i, ColumnType.O, 3)
        if len(bottoms) < 3:
            return None
        low0, low1, low2 = (chart.get_column(b).lowest_price for b in bottoms)
        if low0 < low1 < low2:
            return Pattern(PatternType.DESCENDING_TRIPLE_BOTTOM, bottoms[2], i, low0)
        return None

    # Catapults build on the patterns already recognized

    def _detect_catapult(self, i: int, breakout: PatternType, base: PatternType,
                         result: PatternType) -> Optional[Pattern]:
        if len(self._patterns) < 2:
            return None
        last, second_last = self._patterns[-1], self._patterns[-2]
        if last.pattern_type == breakout and last.end_column_index == i \
                and second_last.pattern_type == base:
            return Pattern(result, second_last.start_column_index, i, last.price)
        return None

    def detect_bullish_catapult(self, chart: PointAndFigureChart, i: int) -> Optional[Pattern]:
        """Double top breakout directly following a triple top breakout."""
        return self._detect_catapult(i, PatternType.DOUBLE_TOP_BREAKOUT,
                                     PatternType.TRIPLE_TOP_BREAKOUT, PatternType.BULLISH_CATAPULT)

    def detect_bearish_catapult(self, chart: PointAndFigureChart, i: int) -> Optional[Pattern]:
        return self._detect_catapult(i, PatternType.DOUBLE_BOTTOM_BREAKDOWN,
                                     PatternType.TRIPLE_BOTTOM_BREAKDOWN, PatternType.BEARISH_CATAPULT)

    # Formations over the preceding span of columns

    @staticmethod
    def _span_pairs(chart: PointAndFigureChart, i: int):
        """(earlier, later) column pairs across the span ending at i."""
        for j in range(i - 1, max(i - FORMATION_SPAN, 0) - 1, -1):
            yield chart.get_column(j), chart.get_column(j + 1)

    def detect_bullish_signal_reversed(self, chart: PointAndFigureChart, i: int) -> Optional[Pattern]:
        """Rising tops and bottoms ending in an O column that breaks the previous low."""
        if i < 6:
            return None
        column = chart.get_column(i)
        if column.column_type != ColumnType.O:
            return None
        rising = all(
            earlier.highest_price < later.highest_price and earlier.lowest_price < later.lowest_price
            for earlier, later in self._span_pairs(chart, i)
        )
        if not rising:
            return None
        previous = previous_column_of_type(chart, i, ColumnType.O)
        if previous != -1 and column.lowest_price < chart.get_column(previous).lowest_price:
            return Pattern(PatternType.BULLISH_SIGNAL_REVERSED, i - FORMATION_SPAN, i, column.lowest_price)
        return None

    def detect_bearish_signal_reversed(self, chart: PointAndFigureChart, i: int) -> Optional[Pattern]:
        if i < 6:
            return None
        column = chart.get_column(i)
        if column.column_type != ColumnType.X:
            return None
        falling = all(
            earlier.highest_price > later.highest_price and earlier.lowest_price > later.lowest_price
            for earlier, later in self._span_pairs(chart, i)
        )
        if not falling:
            return None
        previous = previous_column_of_type(chart, i, ColumnType.X)
        if previous != -1 and column.highest_price > chart.get_column(previous).highest_price:
            return Pattern(PatternType.BEARISH_SIGNAL_REVERSED, i - FORMATION_SPAN, i, column.highest_price)
        return None

    def _is_converging(self, chart: PointAndFigureChart, i: int) -> bool:
        """Rising bottoms together with falling tops across the span."""
        pairs = list(self._span_pairs(chart, i))
        rising_bottoms = all(earlier.lowest_price < later.lowest_price for earlier, later in pairs)
        falling_tops = all(earlier.highest_price > later.highest_price for earlier, later in pairs)
        return rising_bottoms and falling_tops

    def detect_bullish_triangle(self, chart: PointAndFigureChart, i: int) -> Optional[Pattern]:
        if i < 6:
            return None
        column = chart.get_column(i)
        if column.column_type != ColumnType.X or not self._is_converging(chart, i):
            return None
        previous = previous_column_of_type(chart, i, ColumnType.X)
        if previous != -1 and column.highest_price > chart.get_column(previous).highest_price:
            return Pattern(PatternType.BULLISH_TRIANGLE, i - FORMATION_SPAN, i, column.highest_price)
        return None

    def detect_bearish_triangle(self, chart: PointAndFigureChart, i: int) -> Optional[Pattern]:
        if i < 6:
            return None
        column = chart.get_column(i)
        if column.column_type != ColumnType.O or not self._is_converging(chart, i):
            return None
        previous = previous_column_of_type(chart, i, ColumnType.O)
        if previous != -1 and column.lowest_price < chart.get_column(previous).lowest_price:
            return Pattern(PatternType.BEARISH_TRIANGLE, i - FORMATION_SPAN, i, column.lowest_price)
        return None

    # Reversal formations

    def detect_long_tail_down(self, chart: PointAndFigureChart, i: int) -> Optional[Pattern]:
        """X column reversing a long O column."""
        if i < 1:
            return None
        column = chart.get_column(i)
        if column.column_type != ColumnType.X:
            return None
        previous = chart.get_column(i - 1)
        if previous.column_type != ColumnType.O or previous.box_count < LONG_TAIL_MIN_BOXES:
            return None
        return Pattern(PatternType.LONG_TAIL_DOWN, i - 1, i, column.highest_price)

    def detect_high_pole(self, chart: PointAndFigureChart, i: int) -> Optional[Pattern]:
        """X column rising well past the previous top, then at least half retraced."""
        if i < 2:
            return None
        column = chart.get_column(i)
        pole = chart.get_column(i - 1)
        if column.column_type != ColumnType.O or pole.column_type != ColumnType.X:
            return None

        previous = previous_column_of_type(chart, i - 1, ColumnType.X)
        if previous == -1:
            return None

        rise = pole.highest_price - chart.get_column(previous).highest_price
        retracement = pole.highest_price - column.lowest_price
        if rise >= POLE_MIN_BOXES * pole.box_size and retracement >= rise * POLE_MIN_RETRACEMENT:
            return Pattern(PatternType.HIGH_POLE, i - 1, i, pole.highest_price)
        return None

    def detect_low_pole(self, chart: PointAndFigureChart, i: int) -> Optional[Pattern]:
        if i < 2:
            return None
        column = chart.get_column(i)
        pole = chart.get_column(i - 1)
        if column.column_type != ColumnType.X or pole.column_type != ColumnType.O:
            return None

        previous = previous_column_of_type(chart, i - 1, ColumnType.O)
        if previous == -1:
            return None

        fall = chart.get_column(previous).lowest_price - pole.lowest_price
        retracement = column.highest_price - pole.lowest_price
        if fall >= POLE_MIN_BOXES * pole.box_size and retracement >= fall * POLE_MIN_RETRACEMENT:
            return Pattern(PatternType.LOW_POLE, i - 1, i, pole.lowest_price)
        return None

    def detect_bull_trap(self, chart: PointAndFigureChart, i: int) -> Optional[Pattern]:
        """One-box breakout above a double top that immediately reverses down."""
        if i < 2 or chart.get_column(i).column_type != ColumnType.O:
            return None
        breakout = chart.get_column(i - 1)
        if breakout.column_type != ColumnType.X or breakout.box_count != 1:
            return None
        tops = recent_columns_of_type(chart, i - 2, ColumnType.X, 3)
        if len(tops) < 2:
            return None
        high0, high1 = (chart.get_column(t).highest_price for t in tops[:2])
        if _same_price(high0, high1) and breakout.highest_price > high0:
            return Pattern(PatternType.BULL_TRAP, tops[1], i, breakout.highest_price)
        return None

    def detect_bear_trap(self, chart: PointAndFigureChart, i: int) -> Optional[Pattern]:
        if i < 2 or chart.get_column(i).column_type != ColumnType.X:
            return None
        breakdown = chart.get_column(i - 1)
        if breakdown.column_type != ColumnType.O or breakdown.box_count != 1:
            return None
        bottoms = recent_columns_of_type(chart, i - 2, ColumnType.O, 3)
        if len(bottoms) < 2:
            return None
        low0, low1 = (chart.get_column(b).lowest_price for b in bottoms[:2])
        if _same_price(low0, low1) and breakdown.lowest_price < low0:
            return Pattern(PatternType.BEAR_TRAP, bottoms[1], i, breakdown.lowest_price)
        return None

    def detect_spread_triple_top(self, chart: PointAndFigureChart, i: int) -> Optional[Pattern]:
        """Current X column tops at the same price as two earlier X columns anywhere before it."""
        if i < 4 or chart.get_column(i).column_type != ColumnType.X:
            return None
        tops = recent_columns_of_type(chart, i, ColumnType.X)
        if len(tops) < 3:
            return None
        current_high = chart.get_column(tops[0]).highest_price
        matches = sum(1 for t in tops[1:] if _same_price(chart.get_column(t).highest_price, current_high))
        if matches >= 2:
            return Pattern(PatternType.SPREAD_TRIPLE_TOP, tops[2], i, current_high)
        return None

    def detect_spread_triple_bottom(self, chart: PointAndFigureChart, i: int) -> Optional[Pattern]:
        if i < 4 or chart.get_column(i).column_type != ColumnType.O:
            return None
        bottoms = recent_columns_of_type(chart, i, ColumnType.O)
        if len(bottoms) < 3:
            return None
        current_low = chart.get_column(bottoms[0]).lowest_price
        matches = sum(1 for b in bottoms[1:] if _same_price(chart.get_column(b).lowest_price, current_low))
        if matches >= 2:
            return Pattern(PatternType.SPREAD_TRIPLE_BOTTOM, bottoms[2], i, current_low)
        return None

    # Queries

    @property
    def patterns(self) -> list[Pattern]:
        return list(self._patterns)

    def bullish_patterns(self) -> list[Pattern]:
        return [p for p in self._patterns if is_bullish_pattern(p.pattern_type)]

    def bearish_patterns(self) -> list[Pattern]:
        return [p for p in self._patterns if is_bearish_pattern(p.pattern_type)]

    def latest_pattern(self) -> Optional[Pattern]:
        return self._patterns[-1] if self._patterns else None

    def has_pattern(self, pattern_type: PatternType) -> bool:
        return any(p.pattern_type == pattern_type for p in self._patterns)

    def __str__(self) -> str:
        lines = [f"Pattern Recognizer: {len(self._patterns)} patterns detected"]
        for p in self._patterns:
            lines.append(f"  {p.name}: columns {p.start_column_index}-{p.end_column_index}, price {p.price:.2f}")
        return "\n".join(lines)
