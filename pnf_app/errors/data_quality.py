"""
Data quality error classifications for price observations.

These exceptions categorize problems with individual observations fed to a
chart. The chart state is left untouched when one is raised.
"""

from typing import Optional, Dict, Any


class DataQualityError(Exception):
    """Base class for data quality issues that can be handled gracefully."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class TemporalDataError(DataQualityError):
    """Observation timestamp goes backwards relative to the previous one."""

    def __init__(self, message: str, timestamp: Optional[Any] = None,
                 expected_after: Optional[Any] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.timestamp = timestamp
        self.expected_after = expected_after


class MalformedDataError(DataQualityError):
    """Observation exists but its values are unusable."""

    def __init__(self, message: str, raw_data: Optional[str] = None,
                 expected_format: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_data = raw_data
        self.expected_format = expected_format
