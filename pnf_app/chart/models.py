"""
Point-and-figure data models.

A chart is an append-only sequence of columns; each column owns an ordered
set of boxes with distinct prices. Box price and direction are fixed once
placed, only the marker may change afterwards.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterator, Optional

from ..errors import ColumnIndexError


class BoxType(str, Enum):
    """Direction of a single box."""
    X = "X"
    O = "O"


class ColumnType(str, Enum):
    """Logical type of a column. MIXED only occurs with a one-box reversal."""
    X = "X"
    O = "O"
    MIXED = "Mixed"


class ConstructionType(str, Enum):
    """Which prices of an observation drive the chart."""
    CLOSE = "close"
    HIGH_LOW = "high_low"


class BoxSizeType(str, Enum):
    """Box sizing scheme."""
    FIXED = "fixed"
    DEFAULT = "default"
    POINTS = "points"
    PERCENTAGE = "percentage"


@dataclass
class Box:
    """A single box: price level, direction and optional month marker."""
    price: float
    box_type: BoxType
    marker: str = ""

    def __str__(self) -> str:
        return f"{self.price:.5f}{self.marker or self.box_type.value}"


class Column:
    """Ordered, price-unique set of boxes of one logical type."""

    def __init__(self, column_type: ColumnType = ColumnType.X, box_size: float = 0.0):
        self.column_type = column_type
        self.box_size = box_size
        self.last_update: Optional[datetime] = None
        self._boxes: list[Box] = []

    def add_box(self, price: float, box_type: BoxType, marker: str = "") -> bool:
        """Append a box; False if a box at this price already exists."""
        if self.has_box(price):
            return False
        self._boxes.append(Box(price=price, box_type=box_type, marker=marker))
        return True

    def remove_box(self, price: float) -> bool:
        """Remove the box at price; False if there is none."""
        for i, box in enumerate(self._boxes):
            if box.price == price:
                del self._boxes[i]
                return True
        return False

    def has_box(self, price: float) -> bool:
        return self.get_box(price) is not None

    def get_box(self, price: float) -> Optional[Box]:
        for box in self._boxes:
            if box.price == price:
                return box
        return None

    def box_at(self, index: int) -> Box:
        """Box by insertion order; raises ColumnIndexError when out of range."""
        if index < 0 or index >= len(self._boxes):
            raise ColumnIndexError(
                f"Box index {index} out of range",
                index=index,
                size=len(self._boxes)
            )
        return self._boxes[index]

    def get_box_marker(self, price: float) -> str:
        box = self.get_box(price)
        return box.marker if box is not None else ""

    def set_box_marker(self, price: float, marker: str) -> bool:
        box = self.get_box(price)
        if box is None:
            return False
        box.marker = marker
        return True

    @property
    def boxes(self) -> tuple[Box, ...]:
        """Boxes in insertion order."""
        return tuple(self._boxes)

    @property
    def box_count(self) -> int:
        return len(self._boxes)

    @property
    def highest_price(self) -> float:
        """Highest box price, 0.0 for an empty column."""
        if not self._boxes:
            return 0.0
        return max(box.price for box in self._boxes)

    @property
    def lowest_price(self) -> float:
        """Lowest box price, 0.0 for an empty column."""
        if not self._boxes:
            return 0.0
        return min(box.price for box in self._boxes)

    @property
    def midpoint(self) -> float:
        """Column midpoint used as the price proxy by the indicators."""
        if not self._boxes:
            return 0.0
        return (self.highest_price + self.lowest_price) / 2.0

    def clear(self) -> None:
        self._boxes.clear()

    def __len__(self) -> int:
        return len(self._boxes)

    def __iter__(self) -> Iterator[Box]:
        return iter(self._boxes)

    def __str__(self) -> str:
        lines = [f"Column Type: {self.column_type.value}, Boxes: {len(self._boxes)}"]
        lines.extend(str(box) for box in self._boxes)
        return "\n".join(lines)
