"""Buy/sell signal detection"""

from typing import Optional

from ..chart.construction import PointAndFigureChart
from ..chart.models import ColumnType
from ..models.indicators import Signal, SignalType
from ..utils.time import get_market_time


def previous_column_of_type(chart: PointAndFigureChart, column_index: int,
                            column_type: ColumnType) -> int:
    """Index of the nearest column of column_type before column_index, -1 if none."""
    for i in range(column_index - 1, -1, -1):
        if chart.get_column(i).column_type == column_type:
            return i
    return -1


class PnFSignalDetector:
    """
    Scans the columns left to right for breakouts.

    An X column topping the previous X column emits BUY, an O column
    undercutting the previous O column emits SELL. The current signal is the
    kind of the most recent one emitted.
    """

    def __init__(self):
        self._signals: list[Signal] = []
        self.current_signal = SignalType.NONE

    @staticmethod
    def is_buy_signal(chart: PointAndFigureChart, column_index: int) -> bool:
        if column_index < 2:
            return False
        column = chart.get_column(column_index)
        if column.column_type != ColumnType.X:
            return False
        previous = previous_column_of_type(chart, column_index, ColumnType.X)
        if previous == -1:
            return False
        return column.highest_price > chart.get_column(previous).highest_price

    @staticmethod
    def is_sell_signal(chart: PointAndFigureChart, column_index: int) -> bool:
        if column_index < 2:
            return False
        column = chart.get_column(column_index)
        if column.column_type != ColumnType.O:
            return False
        previous = previous_column_of_type(chart, column_index, ColumnType.O)
        if previous == -1:
            return False
        return column.lowest_price < chart.get_column(previous).lowest_price

    def detect_signals(self, chart: PointAndFigureChart) -> None:
        signals = []
        current = SignalType.NONE

        for i, column in enumerate(chart.columns):
            # Timestamp of the column's last update keeps recomputation stable
            timestamp = get_market_time(column.last_update)
            if self.is_buy_signal(chart, i):
                signals.append(Signal(SignalType.BUY, i, column.highest_price, timestamp))
                current = SignalType.BUY
            elif self.is_sell_signal(chart, i):
                signals.append(Signal(SignalType.SELL, i, column.lowest_price, timestamp))
                current = SignalType.SELL

        self._signals = signals
        self.current_signal = current

    @property
    def signals(self) -> list[Signal]:
        return list(self._signals)

    @property
    def last_signal(self) -> Optional[Signal]:
        return self._signals[-1] if self._signals else None

    def has_buy_signal(self) -> bool:
        return self.current_signal == SignalType.BUY

    def has_sell_signal(self) -> bool:
        return self.current_signal == SignalType.SELL

    def __str__(self) -> str:
        current = self.current_signal.value.upper() if self.current_signal != SignalType.NONE else "NONE"
        return f"Signal Detector: {len(self._signals)} total signals\nCurrent Signal: {current}"
