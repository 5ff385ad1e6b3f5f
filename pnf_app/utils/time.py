"""
Time semantics utilities for observation timestamps and month markers.

Observation timestamps from the feed are authoritative; wall-clock time is
only used as a last-resort fallback when a consumer asks for a timestamp
that was never recorded.
"""

from datetime import datetime, timezone
from typing import Optional, Union

from ..errors import MalformedDataError

# Month markers, January through December.
MONTH_MARKERS = ("1", "2", "3", "4", "5", "6", "7", "8", "9", "A", "B", "C")

TimestampLike = Union[datetime, int, float, str]


def to_market_time(value: TimestampLike) -> datetime:
    """
    Coerce a feed timestamp into a datetime.

    Accepts datetimes (returned unchanged), epoch milliseconds as int/float,
    and ISO8601 strings (a trailing "Z" is treated as UTC).

    Raises:
        MalformedDataError: If the value cannot be interpreted
    """
    if isinstance(value, datetime):
        return value

    if isinstance(value, bool):
        raise MalformedDataError(f"Invalid timestamp type: {type(value)}",
                                 raw_data=str(value), expected_format="datetime")

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise MalformedDataError(f"Timestamp out of range: {value}",
                                     raw_data=str(value),
                                     expected_format="epoch milliseconds") from e

    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError as e:
            raise MalformedDataError(f"Unparseable timestamp: {value!r}",
                                     raw_data=value,
                                     expected_format="ISO8601") from e

    raise MalformedDataError(f"Invalid timestamp type: {type(value)}",
                             raw_data=str(value), expected_format="datetime")


def get_market_time(market_ts: Optional[datetime] = None) -> datetime:
    """
    Get market time, preferring the recorded timestamp over wall-clock time.

    Args:
        market_ts: Optional timestamp recorded from the feed

    Returns:
        The recorded timestamp, or the current UTC time if none was recorded
    """
    if market_ts is not None:
        return market_ts

    return datetime.now(timezone.utc)


def month_marker(month: int) -> str:
    """Marker label for a calendar month (1-12); empty string otherwise."""
    if 1 <= month <= 12:
        return MONTH_MARKERS[month - 1]
    return ""


def month_changed(current: datetime, previous: Optional[datetime]) -> bool:
    """True on the first observation or when calendar month/year differs."""
    if previous is None:
        return True
    return (current.year, current.month) != (previous.year, previous.month)


def format_market_time(market_ts: Optional[datetime]) -> Optional[str]:
    """ISO8601 representation for logging, None passes through."""
    return market_ts.isoformat() if market_ts is not None else None
