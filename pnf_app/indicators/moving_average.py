"""Simple moving average over column midpoints"""

from ..chart.construction import PointAndFigureChart
from ..errors import ConfigurationError


def column_midpoints(chart: PointAndFigureChart) -> list[float]:
    """(highest + lowest) / 2 for every column, 0.0 for empty columns."""
    return [column.midpoint for column in chart.columns]


class PnFMovingAverage:
    """
    Trailing simple moving average of column midpoints.

    Values below index period - 1 are reported as 0.0 and have_value is
    False for them. Every call to calculate recomputes the whole series.
    """

    def __init__(self, period: int):
        if isinstance(period, bool) or not isinstance(period, int) or period < 1:
            raise ConfigurationError(f"Moving average period must be a positive integer, got {period!r}",
                                     field="period", value=period)
        self.period = period
        self._values: list[float] = []

    def calculate(self, chart: PointAndFigureChart) -> None:
        midpoints = column_midpoints(chart)
        values = []
        for i in range(len(midpoints)):
            if i < self.period - 1:
                values.append(0.0)
                continue
            window = midpoints[i - self.period + 1:i + 1]
            values.append(sum(window) / self.period)
        self._values = values

    def get_value(self, column_index: int) -> float:
        """Average at column_index, 0.0 when undefined or out of range."""
        if column_index < 0 or column_index >= len(self._values):
            return 0.0
        return self._values[column_index]

    def has_value(self, column_index: int) -> bool:
        return self.period - 1 <= column_index < len(self._values)

    @property
    def values(self) -> list[float]:
        return list(self._values)

    def __str__(self) -> str:
        return f"SMA({self.period}): {len(self._values)} values calculated"
