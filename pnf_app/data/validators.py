"""
Observation validation and payload parsing.

Validation rejects observations the chart cannot process: non-numeric,
non-finite or non-positive prices, inverted high/low ranges, and timestamps
that go backwards.
"""

import math
from datetime import datetime
from typing import Any, Optional

from ..errors import MalformedDataError, TemporalDataError
from ..utils.time import to_market_time
from .models import Observation


class ObservationValidator:
    """Validates observations before they reach the construction engine."""

    @staticmethod
    def validate_price(value: Any, name: str = "price") -> float:
        """
        Validate a single price value.

        Raises:
            MalformedDataError: If the price is unusable
        """
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise MalformedDataError(f"Invalid {name} type: {type(value)}",
                                     raw_data=str(value), expected_format="float")
        if math.isnan(value) or math.isinf(value):
            raise MalformedDataError(f"Invalid {name} value: {value}",
                                     raw_data=str(value))
        if value <= 0:
            raise MalformedDataError(f"Non-positive {name}: {value}",
                                     raw_data=str(value))
        return float(value)

    @classmethod
    def validate_range(cls, high: Any, low: Any) -> tuple[float, float]:
        """Validate a high/low pair."""
        high = cls.validate_price(high, "high")
        low = cls.validate_price(low, "low")
        if high < low:
            raise MalformedDataError(
                f"High price {high} less than low price {low}",
                context={"high": high, "low": low}
            )
        return high, low

    @staticmethod
    def validate_timing(ts: datetime, last_ts: Optional[datetime]) -> None:
        """
        Ensure observations arrive in chronological order.

        Equal timestamps are accepted.

        Raises:
            TemporalDataError: If ts is earlier than last_ts
            MalformedDataError: If the timestamps cannot be compared
        """
        if last_ts is None:
            return
        try:
            went_back = ts < last_ts
        except TypeError as e:
            raise MalformedDataError(
                "Cannot compare naive and timezone-aware timestamps",
                raw_data=str(ts)
            ) from e
        if went_back:
            raise TemporalDataError(
                f"Observation at {ts.isoformat()} precedes last observation",
                timestamp=ts,
                expected_after=last_ts
            )


def parse_observation(payload: dict[str, Any]) -> Observation:
    """
    Build an Observation from a raw record.

    Expected keys: "timestamp" (datetime, epoch ms or ISO8601) and "close";
    "high", "low" and "open" default to close when absent.

    Raises:
        MalformedDataError: If required fields are missing or invalid
    """
    if "timestamp" not in payload or "close" not in payload:
        raise MalformedDataError(
            "Observation requires 'timestamp' and 'close'",
            raw_data=str(payload)[:100],
            expected_format="{timestamp, open, high, low, close}"
        )

    ts = to_market_time(payload["timestamp"])
    close = ObservationValidator.validate_price(payload["close"], "close")
    high = payload.get("high", close)
    low = payload.get("low", close)
    high, low = ObservationValidator.validate_range(high, low)

    open_price = payload.get("open")
    if open_price is not None:
        open_price = ObservationValidator.validate_price(open_price, "open")

    return Observation(ts=ts, high=high, low=low, close=close, open=open_price)
