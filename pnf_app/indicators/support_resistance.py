"""Support and resistance levels from column extremes"""

from typing import Optional

from ..chart.construction import PointAndFigureChart
from ..chart.models import ColumnType
from ..errors import ConfigurationError
from ..models.indicators import SupportResistanceLevel


class PnFSupportResistance:
    """
    Aggregates column extremes into support and resistance levels.

    Each O column's low is a support touch and each X column's high a
    resistance touch. A touch joins the first level of its kind within
    price_threshold (relative), otherwise it starts a new level. After the
    pass, levels of the same kind still within the threshold are merged and
    the surviving price becomes the touch-weighted average.
    """

    def __init__(self, price_threshold: float = 0.01, tolerance: float = 0.02):
        if not 0 < price_threshold <= 1:
            raise ConfigurationError(f"Price threshold must be in (0, 1], got {price_threshold!r}",
                                     field="price_threshold", value=price_threshold)
        if not 0 < tolerance <= 1:
            raise ConfigurationError(f"Proximity tolerance must be in (0, 1], got {tolerance!r}",
                                     field="tolerance", value=tolerance)
        self.price_threshold = price_threshold
        self.tolerance = tolerance
        self._levels: list[SupportResistanceLevel] = []

    def identify_levels(self, chart: PointAndFigureChart) -> None:
        self._levels = []
        for i, column in enumerate(chart.columns):
            if column.column_type == ColumnType.O:
                self._add_touch(column.lowest_price, True, i)
            elif column.column_type == ColumnType.X:
                self._add_touch(column.highest_price, False, i)
        self._merge_similar_levels()

    def _add_touch(self, price: float, is_support: bool, column_index: int) -> None:
        for level in self._levels:
            if level.is_support == is_support and abs(level.price - price) / price < self.price_threshold:
                level.touch_count += 1
                level.last_column_index = column_index
                return
        self._levels.append(SupportResistanceLevel(price, is_support, column_index))

    def _merge_similar_levels(self) -> None:
        merged: list[SupportResistanceLevel] = []
        for level in self._levels:
            target = next(
                (m for m in merged
                 if m.is_support == level.is_support
                 and m.relative_distance(level.price) < self.price_threshold),
                None
            )
            if target is None:
                merged.append(level)
                continue

            total = target.touch_count + level.touch_count
            target.price = (target.price * target.touch_count + level.price * level.touch_count) / total
            target.touch_count = total
            target.first_column_index = min(target.first_column_index, level.first_column_index)
            target.last_column_index = max(target.last_column_index, level.last_column_index)
        self._levels = merged

    @property
    def levels(self) -> list[SupportResistanceLevel]:
        return list(self._levels)

    def support_levels(self) -> list[SupportResistanceLevel]:
        return [level for level in self._levels if level.is_support]

    def resistance_levels(self) -> list[SupportResistanceLevel]:
        return [level for level in self._levels if not level.is_support]

    def significant_levels(self, min_touches: int = 3) -> list[SupportResistanceLevel]:
        return [level for level in self._levels if level.touch_count >= min_touches]

    def is_near_support(self, price: float, tolerance: Optional[float] = None) -> bool:
        """True if a support level lies within tolerance (default: the configured one)."""
        limit = self.tolerance if tolerance is None else tolerance
        return any(level.is_support and level.relative_distance(price) < limit
                   for level in self._levels)

    def is_near_resistance(self, price: float, tolerance: Optional[float] = None) -> bool:
        limit = self.tolerance if tolerance is None else tolerance
        return any(not level.is_support and level.relative_distance(price) < limit
                   for level in self._levels)

    def __str__(self) -> str:
        lines = [f"Support/Resistance: {len(self._levels)} levels identified", "Support Levels:"]
        lines.extend(f"  Price: {level.price:.5f}, Touches: {level.touch_count}"
                     for level in self.support_levels())
        lines.append("Resistance Levels:")
        lines.extend(f"  Price: {level.price:.5f}, Touches: {level.touch_count}"
                     for level in self.resistance_levels())
        return "\n".join(lines)
