"""
Point-and-figure chart model and box sizing.

The construction engine lives in ``pnf_app.chart.construction`` and is not
re-exported here, since it depends on the trend line package which in turn
depends on these models.
"""

from .box_size import BoxSizePolicy
from .models import Box, BoxSizeType, BoxType, Column, ColumnType, ConstructionType

__all__ = [
    "Box",
    "BoxSizePolicy",
    "BoxSizeType",
    "BoxType",
    "Column",
    "ColumnType",
    "ConstructionType",
]
