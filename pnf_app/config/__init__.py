"""Configuration defaults, YAML loading and validation."""

from .defaults import ChartParams, DefaultConfig, IndicatorParams, get_default_config
from .loader import ConfigLoader
from .validation import ConfigValidator, ValidationError

__all__ = [
    "ChartParams",
    "DefaultConfig",
    "IndicatorParams",
    "get_default_config",
    "ConfigLoader",
    "ConfigValidator",
    "ValidationError",
]
