"""Vertical count price objectives"""

from typing import Optional

from ..chart.construction import PointAndFigureChart
from ..chart.models import ColumnType
from ..models.indicators import PriceObjective


class PnFPriceObjective:
    """
    Projects targets with the vertical count method.

    An X column projects its box count times its box size above its high
    (bullish), an O column the same distance below its low (bearish). Mixed
    columns have no direction and yield no objective.
    """

    def __init__(self):
        self._objectives: list[PriceObjective] = []

    def calculate_vertical_count(self, chart: PointAndFigureChart,
                                 column_index: int) -> Optional[PriceObjective]:
        """
        Append the objective for one column.

        Args:
            chart: Chart to read from
            column_index: Base column

        Returns:
            The appended objective, or None for an empty or Mixed column

        Raises:
            ColumnIndexError: If column_index is out of range
        """
        column = chart.get_column(column_index)
        if column.box_count == 0:
            return None

        extension = column.box_count * column.box_size
        if column.column_type == ColumnType.X:
            objective = PriceObjective(column.highest_price + extension, column_index,
                                       column.box_count, True)
        elif column.column_type == ColumnType.O:
            objective = PriceObjective(column.lowest_price - extension, column_index,
                                       column.box_count, False)
        else:
            return None

        self._objectives.append(objective)
        return objective

    def calculate(self, chart: PointAndFigureChart) -> None:
        """Recompute objectives for every column."""
        self._objectives = []
        for i in range(chart.column_count):
            self.calculate_vertical_count(chart, i)

    @property
    def objectives(self) -> list[PriceObjective]:
        return list(self._objectives)

    def latest_objective(self) -> Optional[PriceObjective]:
        return self._objectives[-1] if self._objectives else None

    def __str__(self) -> str:
        lines = [f"Price Objectives: {len(self._objectives)} calculated"]
        for obj in self._objectives:
            direction = "Bullish" if obj.is_bullish else "Bearish"
            lines.append(f"  {direction} Target: {obj.target_price:.5f} (Extension: {obj.extension_boxes} boxes)")
        return "\n".join(lines)
