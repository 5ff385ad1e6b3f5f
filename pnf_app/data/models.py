"""
Canonical price observation record.

Observations are produced by an ingestion collaborator (CSV loaders, feeds)
and fed to a chart in chronological order.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Observation:
    """Single OHLC price observation."""
    ts: datetime                   # Observation timestamp, authoritative
    high: float
    low: float
    close: float
    open: Optional[float] = None   # Carried for collaborators, unused by the chart

    @classmethod
    def from_price(cls, price: float, ts: datetime) -> "Observation":
        """Close-only observation with high = low = close."""
        return cls(ts=ts, high=price, low=price, close=price)
