"""Pytest configuration and shared fixtures."""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Optional

from pnf_app.chart.construction import PointAndFigureChart
from pnf_app.chart.models import BoxSizeType, BoxType, Column, ColumnType, ConstructionType


START_TIME = datetime(2024, 1, 2, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def start_time() -> datetime:
    """First observation time used across chart tests."""
    return START_TIME


@pytest.fixture
def fixed_chart() -> PointAndFigureChart:
    """Close-price chart with a fixed box of 1.0 and a 3-box reversal."""
    return PointAndFigureChart(ConstructionType.CLOSE, BoxSizeType.FIXED, 1.0, 3)


@pytest.fixture
def feed() -> Callable[..., list[bool]]:
    """Feed close prices to a chart one day apart."""
    def _feed(chart: PointAndFigureChart, prices: Iterable[float],
              start: datetime = START_TIME, step: timedelta = timedelta(days=1)) -> list[bool]:
        return [chart.add_price(price, start + i * step) for i, price in enumerate(prices)]
    return _feed


@pytest.fixture
def zigzag_chart(fixed_chart, feed) -> PointAndFigureChart:
    """
    Six alternating columns:

    0 X {105}, 1 O {104..101}, 2 X {102..106},
    3 O {105..102}, 4 X {103..107}, 5 O {106..100}
    """
    feed(fixed_chart, [105, 101, 106, 102, 107, 100])
    return fixed_chart


def make_column(column_type: ColumnType, low: float, high: float,
                box_size: float = 1.0) -> Column:
    """Column holding every box from low to high."""
    column = Column(column_type, box_size)
    box_type = BoxType.O if column_type == ColumnType.O else BoxType.X
    steps = int(round((high - low) / box_size))
    prices = [low + i * box_size for i in range(steps + 1)]
    if box_type == BoxType.O:
        prices.reverse()
    for price in prices:
        column.add_box(price, box_type)
    return column


class StubChart:
    """Read-only chart stand-in exposing just the column queries indicators use."""

    def __init__(self, columns: list[Column]):
        self._columns = columns

    @property
    def columns(self) -> tuple[Column, ...]:
        return tuple(self._columns)

    @property
    def column_count(self) -> int:
        return len(self._columns)

    def get_column(self, column_index: int) -> Column:
        return self._columns[column_index]

    def get_last_column(self) -> Optional[Column]:
        return self._columns[-1] if self._columns else None


@pytest.fixture
def column_factory() -> Callable[..., Column]:
    return make_column


@pytest.fixture
def stub_chart() -> Callable[[list[Column]], StubChart]:
    return StubChart
