"""
Error classification system for chart construction and analysis.

This module provides a structured exception hierarchy separating bad input
data (recoverable, the observation is rejected) from configuration and
query misuse (programmer errors).
"""

from .data_quality import (
    DataQualityError,
    MalformedDataError,
    TemporalDataError,
)
from .system_failures import (
    SystemFailureError,
    ConfigurationError,
    ColumnIndexError,
)

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "MalformedDataError",
    "TemporalDataError",
    # System Failures
    "SystemFailureError",
    "ConfigurationError",
    "ColumnIndexError",
]
