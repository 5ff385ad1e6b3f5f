"""Bollinger-style volatility bands over column midpoints"""

import math

from ..chart.construction import PointAndFigureChart
from ..errors import ConfigurationError
from .moving_average import column_midpoints


def population_std_dev(values: list[float], mean: float) -> float:
    """Population standard deviation of values around mean."""
    if not values:
        return 0.0
    return math.sqrt(sum((value - mean) ** 2 for value in values) / len(values))


class PnFBollingerBands:
    """
    Trailing mean of column midpoints plus/minus k population standard deviations.

    Follows the same undefined-below-period rule as the moving average.
    """

    def __init__(self, period: int = 5, std_devs: float = 2.0):
        if isinstance(period, bool) or not isinstance(period, int) or period < 1:
            raise ConfigurationError(f"Band period must be a positive integer, got {period!r}",
                                     field="period", value=period)
        if std_devs < 0:
            raise ConfigurationError(f"Band width must not be negative, got {std_devs!r}",
                                     field="std_devs", value=std_devs)
        self.period = period
        self.std_devs = std_devs
        self._middle: list[float] = []
        self._upper: list[float] = []
        self._lower: list[float] = []

    def calculate(self, chart: PointAndFigureChart) -> None:
        midpoints = column_midpoints(chart)
        middle, upper, lower = [], [], []

        for i in range(len(midpoints)):
            if i < self.period - 1:
                middle.append(0.0)
                upper.append(0.0)
                lower.append(0.0)
                continue

            window = midpoints[i - self.period + 1:i + 1]
            mean = sum(window) / self.period
            width = self.std_devs * population_std_dev(window, mean)
            middle.append(mean)
            upper.append(mean + width)
            lower.append(mean - width)

        self._middle, self._upper, self._lower = middle, upper, lower

    @staticmethod
    def _value_at(series: list[float], column_index: int) -> float:
        if column_index < 0 or column_index >= len(series):
            return 0.0
        return series[column_index]

    def get_middle_band(self, column_index: int) -> float:
        return self._value_at(self._middle, column_index)

    def get_upper_band(self, column_index: int) -> float:
        return self._value_at(self._upper, column_index)

    def get_lower_band(self, column_index: int) -> float:
        return self._value_at(self._lower, column_index)

    def has_value(self, column_index: int) -> bool:
        return self.period - 1 <= column_index < len(self._middle)

    def is_above_upper_band(self, column_index: int, price: float) -> bool:
        return self.has_value(column_index) and price > self._upper[column_index]

    def is_below_lower_band(self, column_index: int, price: float) -> bool:
        return self.has_value(column_index) and price < self._lower[column_index]

    @property
    def middle_band(self) -> list[float]:
        return list(self._middle)

    @property
    def upper_band(self) -> list[float]:
        return list(self._upper)

    @property
    def lower_band(self) -> list[float]:
        return list(self._lower)

    def __str__(self) -> str:
        return f"Bollinger Bands({self.period}, {self.std_devs}): {len(self._middle)} values"
