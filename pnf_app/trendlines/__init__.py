"""Trend line detection and tracking over the column sequence."""

from .manager import TrendLineManager
from .models import TrendLine, TrendLinePoint, TrendLineType

__all__ = ["TrendLine", "TrendLineManager", "TrendLinePoint", "TrendLineType"]
