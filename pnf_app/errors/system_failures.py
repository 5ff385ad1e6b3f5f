"""
System failure error classifications.

These exceptions represent misuse of the core: invalid configuration or
queries outside the bounds of the chart.
"""

from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for unrecoverable failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class ConfigurationError(SystemFailureError):
    """Chart or indicator configuration is invalid."""

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Optional[Any] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value


class ColumnIndexError(SystemFailureError, IndexError):
    """Column or box index outside the current bounds."""

    def __init__(self, message: str, index: Optional[int] = None,
                 size: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.index = index
        self.size = size
