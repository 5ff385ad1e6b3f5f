"""
Point-and-figure chart construction engine.

Consumes a chronological feed of price observations and maintains the column
list. The state machine is implicit in the type of the last column (none, X,
O or Mixed): each observation either starts the first column, reverses into
a new column, extends the current one, or changes nothing.
"""

from datetime import datetime
from typing import Optional, Union

from ..config.defaults import ChartParams
from ..data.models import Observation
from ..data.validators import ObservationValidator
from ..errors import ColumnIndexError, ConfigurationError
from ..logging.config import get_chart_logger, log_column_event
from ..trendlines.manager import TrendLineManager
from ..utils.time import (
    MONTH_MARKERS,
    TimestampLike,
    format_market_time,
    month_changed,
    month_marker,
    to_market_time,
)
from .box_size import ROUNDING_EPSILON, BoxSizePolicy, normalize_price
from .models import BoxSizeType, BoxType, Column, ColumnType, ConstructionType

logger = get_chart_logger(__name__)


class PointAndFigureChart:
    """
    A single point-and-figure chart.

    The chart exclusively owns its columns and its trend line manager.
    Only the last column is ever mutated; configuration setters apply to
    subsequent observations and never rebuild history.
    """

    def __init__(
        self,
        construction_type: Union[ConstructionType, str] = ConstructionType.CLOSE,
        box_size_type: Union[BoxSizeType, str] = BoxSizeType.DEFAULT,
        box_size: float = 0.0,
        reversal_count: int = 3,
        track_trend_lines: bool = True,
    ) -> None:
        self._construction_type = self._coerce_construction_type(construction_type)
        box_size_type = self._coerce_box_size_type(box_size_type)
        self._validate_box_size(box_size_type, box_size)
        self._validate_reversal_count(reversal_count)

        self._policy = BoxSizePolicy(box_size_type, float(box_size))
        self._reversal_count = reversal_count
        self._columns: list[Column] = []
        self._last_time: Optional[datetime] = None
        self.trend_line_manager: Optional[TrendLineManager] = (
            TrendLineManager(float(box_size)) if track_trend_lines else None
        )

    @classmethod
    def from_params(cls, params: ChartParams) -> "PointAndFigureChart":
        """Build a chart from configuration parameters."""
        return cls(
            construction_type=params.construction,
            box_size_type=params.box_size_type,
            box_size=params.box_size,
            reversal_count=params.reversal_count,
            track_trend_lines=params.track_trend_lines,
        )

    # Configuration validation

    @staticmethod
    def _coerce_construction_type(value: Union[ConstructionType, str]) -> ConstructionType:
        try:
            return ConstructionType(value)
        except ValueError as e:
            raise ConfigurationError(f"Unknown construction type: {value!r}",
                                     field="construction", value=value) from e

    @staticmethod
    def _coerce_box_size_type(value: Union[BoxSizeType, str]) -> BoxSizeType:
        try:
            return BoxSizeType(value)
        except ValueError as e:
            raise ConfigurationError(f"Unknown box size type: {value!r}",
                                     field="box_size_type", value=value) from e

    @staticmethod
    def _validate_box_size(box_size_type: BoxSizeType, box_size: float) -> None:
        if isinstance(box_size, bool) or not isinstance(box_size, (int, float)):
            raise ConfigurationError(f"Box size must be a number, got {box_size!r}",
                                     field="box_size", value=box_size)
        if box_size < 0:
            raise ConfigurationError(f"Box size must not be negative, got {box_size!r}",
                                     field="box_size", value=box_size)
        if box_size_type != BoxSizeType.DEFAULT and box_size == 0:
            raise ConfigurationError(
                f"Box size must be positive for {box_size_type.value} sizing",
                field="box_size", value=box_size
            )

    @staticmethod
    def _validate_reversal_count(reversal_count: int) -> None:
        if isinstance(reversal_count, bool) or not isinstance(reversal_count, int) or reversal_count < 1:
            raise ConfigurationError(
                f"Reversal count must be a positive integer, got {reversal_count!r}",
                field="reversal_count", value=reversal_count
            )

    # Configuration accessors

    @property
    def construction_type(self) -> ConstructionType:
        return self._construction_type

    @property
    def box_size_type(self) -> BoxSizeType:
        return self._policy.box_size_type

    @property
    def box_size(self) -> float:
        """Configured box size, or under DEFAULT sizing the one last implied by price."""
        return self._policy.box_size

    @property
    def reversal_count(self) -> int:
        return self._reversal_count

    @property
    def last_observation_time(self) -> Optional[datetime]:
        return self._last_time

    def set_construction_type(self, construction_type: Union[ConstructionType, str]) -> None:
        self._construction_type = self._coerce_construction_type(construction_type)

    def set_box_size_type(self, box_size_type: Union[BoxSizeType, str]) -> None:
        box_size_type = self._coerce_box_size_type(box_size_type)
        self._validate_box_size(box_size_type, self._policy.box_size)
        self._policy.box_size_type = box_size_type

    def set_box_size(self, box_size: float) -> None:
        self._validate_box_size(self._policy.box_size_type, box_size)
        self._policy.box_size = float(box_size)

    def set_reversal_count(self, reversal_count: int) -> None:
        self._validate_reversal_count(reversal_count)
        self._reversal_count = reversal_count

    # Box sizing

    def box_size_for(self, price: float) -> float:
        return self._policy.box_size_for(price)

    def round_to_box_size(self, price: float, round_up: bool) -> float:
        return self._policy.round_to_box_size(price, round_up)

    # Observation processing

    def add_price(self, price: float, time: TimestampLike) -> bool:
        """Close-only convenience form of add_observation."""
        return self.add_observation(price, price, price, time)

    def add_record(self, observation: Observation) -> bool:
        return self.add_observation(observation.high, observation.low,
                                    observation.close, observation.ts)

    def add_observation(self, high: float, low: float, close: float,
                        time: TimestampLike) -> bool:
        """
        Process one price observation.

        Args:
            high: Period high (used in HIGH_LOW construction)
            low: Period low (used in HIGH_LOW construction)
            close: Period close (used in CLOSE construction)
            time: Observation timestamp, not earlier than the previous one

        Returns:
            True once the observation is recorded, whether or not it added
            boxes. False only when a reversal column was appended without a
            trend line manager to notify.

        Raises:
            MalformedDataError: If the prices or timestamp are unusable
            TemporalDataError: If the timestamp goes backwards
        """
        ts = to_market_time(time)
        if self._construction_type == ConstructionType.HIGH_LOW:
            high, low = ObservationValidator.validate_range(high, low)
        else:
            close = ObservationValidator.validate_price(close, "close")
            high = low = close
        ObservationValidator.validate_timing(ts, self._last_time)

        marker = month_marker(ts.month) if month_changed(ts, self._last_time) else ""
        box_size = self._policy.box_size_for(high)

        last_column = self.get_last_column()
        if last_column is None:
            self._start_first_column(high, box_size, marker, ts)
            return True

        reversal = self._detect_reversal(high, last_column, box_size)
        reversal_price = high
        if reversal is None and self._construction_type == ConstructionType.HIGH_LOW:
            reversal = self._detect_reversal(low, last_column, box_size)
            reversal_price = low

        if reversal is not None:
            return self._start_reversal_column(reversal, reversal_price, last_column,
                                               box_size, marker, ts)

        added = self._extend_column(last_column, high, low, box_size, marker)
        if added:
            last_column.last_update = ts
            logger.debug(
                "Column extended",
                column_index=len(self._columns) - 1,
                boxes=last_column.box_count,
                highest=last_column.highest_price,
                lowest=last_column.lowest_price
            )
        self._last_time = ts
        return True

    def _start_first_column(self, price: float, box_size: float, marker: str,
                            ts: datetime) -> None:
        column = Column(ColumnType.X, box_size)
        column.add_box(self._policy.round_to_box_size(price, False, box_size), BoxType.X, marker)
        column.last_update = ts
        self._columns.append(column)
        self._last_time = ts

        log_column_event(
            logger,
            column_index=0,
            column_type=column.column_type.value,
            trigger="first_observation",
            context={"price": price, "box_size": box_size,
                     "timestamp": format_market_time(ts)}
        )

    def _detect_reversal(self, price: float, column: Column,
                         box_size: float) -> Optional[BoxType]:
        """Direction of the new column if price reverses the current one."""
        if column.box_count == 0:
            return None

        tolerance = box_size * ROUNDING_EPSILON
        highest = column.highest_price
        lowest = column.lowest_price

        if column.column_type == ColumnType.X:
            if price <= highest - self._reversal_count * box_size + tolerance:
                return BoxType.O
        elif column.column_type == ColumnType.O:
            if price >= lowest + self._reversal_count * box_size - tolerance:
                return BoxType.X
        else:
            if price > highest + box_size:
                return BoxType.X
            if price < lowest - box_size:
                return BoxType.O

        return None

    def _start_reversal_column(self, direction: BoxType, price: float, previous: Column,
                               box_size: float, marker: str, ts: datetime) -> bool:
        if self._reversal_count == 1:
            column_type = ColumnType.MIXED
        else:
            column_type = ColumnType.X if direction == BoxType.X else ColumnType.O

        column = Column(column_type, box_size)
        if direction == BoxType.X:
            self._fill_up(column, previous.lowest_price, price, box_size, marker)
        else:
            self._fill_down(column, previous.highest_price, price, box_size, marker)
        column.last_update = ts

        self._columns.append(column)
        self._last_time = ts
        column_index = len(self._columns) - 1

        log_column_event(
            logger,
            column_index=column_index,
            column_type=column_type.value,
            trigger="reversal",
            context={
                "price": price,
                "boxes": column.box_count,
                "box_size": box_size,
                "timestamp": format_market_time(ts),
            }
        )

        if self.trend_line_manager is None:
            logger.warning(
                "Reversal recorded without trend line manager, trend lines not updated",
                column_index=column_index
            )
            return False

        self.trend_line_manager.update_trend_lines(self._columns, column_index, box_size)
        return True

    def _extend_column(self, column: Column, high: float, low: float,
                       box_size: float, marker: str) -> bool:
        column_type = column.column_type
        before = column.box_count

        if column_type in (ColumnType.X, ColumnType.MIXED) and high > column.highest_price:
            self._fill_up(column, column.highest_price, high, box_size, marker)
        elif column_type in (ColumnType.O, ColumnType.MIXED) and low < column.lowest_price:
            self._fill_down(column, column.lowest_price, low, box_size, marker)

        return column.box_count > before

    def _fill_up(self, column: Column, base: float, price: float,
                 box_size: float, marker: str) -> None:
        """Add X boxes one box above base up to price rounded up."""
        limit = self._policy.round_to_box_size(price, True, box_size)
        tolerance = box_size * ROUNDING_EPSILON
        step = 1
        current = normalize_price(base + box_size)
        while current <= limit + tolerance:
            column.add_box(current, BoxType.X, marker)
            marker = ""
            step += 1
            current = normalize_price(base + step * box_size)

    def _fill_down(self, column: Column, base: float, price: float,
                   box_size: float, marker: str) -> None:
        """Add O boxes one box below base down to price rounded down."""
        limit = self._policy.round_to_box_size(price, False, box_size)
        tolerance = box_size * ROUNDING_EPSILON
        step = 1
        current = normalize_price(base - box_size)
        while current >= limit - tolerance:
            column.add_box(current, BoxType.O, marker)
            marker = ""
            step += 1
            current = normalize_price(base - step * box_size)

    # Read-only queries

    @property
    def columns(self) -> tuple[Column, ...]:
        return tuple(self._columns)

    @property
    def column_count(self) -> int:
        return len(self._columns)

    def get_column(self, column_index: int) -> Column:
        """Column by index; raises ColumnIndexError when out of range."""
        if column_index < 0 or column_index >= len(self._columns):
            raise ColumnIndexError(
                f"Column index {column_index} out of range",
                index=column_index,
                size=len(self._columns)
            )
        return self._columns[column_index]

    def get_last_column(self) -> Optional[Column]:
        return self._columns[-1] if self._columns else None

    def _indices_of(self, column_type: ColumnType) -> list[int]:
        return [i for i, column in enumerate(self._columns) if column.column_type == column_type]

    def x_column_indices(self) -> list[int]:
        return self._indices_of(ColumnType.X)

    def o_column_indices(self) -> list[int]:
        return self._indices_of(ColumnType.O)

    def mixed_column_indices(self) -> list[int]:
        return self._indices_of(ColumnType.MIXED)

    def x_column_count(self) -> int:
        return len(self.x_column_indices())

    def o_column_count(self) -> int:
        return len(self.o_column_indices())

    def mixed_column_count(self) -> int:
        return len(self.mixed_column_indices())

    def get_all_prices(self) -> list[float]:
        """Distinct box prices across all columns, highest first."""
        prices: dict[float, float] = {}
        for column in self._columns:
            for box in column:
                prices.setdefault(normalize_price(box.price), box.price)
        return sorted(prices.values(), reverse=True)

    @staticmethod
    def is_month_marker(marker: str) -> bool:
        return marker in MONTH_MARKERS

    # Trend bias

    def has_bullish_bias(self) -> bool:
        return self.trend_line_manager is not None and self.trend_line_manager.has_bullish_bias()

    def has_bearish_bias(self) -> bool:
        return self.trend_line_manager is not None and self.trend_line_manager.has_bearish_bias()

    def should_take_bullish_signals(self) -> bool:
        """Bullish bias, or no bias at all."""
        return self.has_bullish_bias() or not self.has_bearish_bias()

    def should_take_bearish_signals(self) -> bool:
        """Bearish bias, or no bias at all."""
        return self.has_bearish_bias() or not self.has_bullish_bias()

    def is_above_bullish_support(self, price: float) -> bool:
        if self.trend_line_manager is None:
            return False
        return self.trend_line_manager.is_above_bullish_support(len(self._columns) - 1, price)

    def is_below_bearish_resistance(self, price: float) -> bool:
        if self.trend_line_manager is None:
            return False
        return self.trend_line_manager.is_below_bearish_resistance(len(self._columns) - 1, price)

    def clear(self) -> None:
        self._columns.clear()
        self._last_time = None
        if self.trend_line_manager is not None:
            self.trend_line_manager.clear()

    def __str__(self) -> str:
        construction = "Closing Price" if self._construction_type == ConstructionType.CLOSE else "High/Low"
        lines = [
            "Point & Figure Chart",
            f"Construction: {construction}, Box Size: {self.box_size_type.value.title()} "
            f"({self.box_size:.5f}), Reversal: {self._reversal_count}",
            f"Columns: {len(self._columns)}",
        ]
        if self.trend_line_manager is not None:
            bias = "BULLISH" if self.has_bullish_bias() else "BEARISH" if self.has_bearish_bias() else "NONE"
            lines.append(f"Trend Bias: {bias}")
        lines.append("")
        for i, column in enumerate(self._columns, start=1):
            lines.append(f"Column {i}:")
            lines.append(str(column))
            lines.append("")
        if self.trend_line_manager is not None:
            lines.append(str(self.trend_line_manager))
        return "\n".join(lines)
