"""Default configuration parameters for chart construction and indicators."""

from dataclasses import dataclass, fields
from typing import Any


@dataclass(frozen=True)
class ChartParams:
    """Chart construction parameters."""
    construction: str = "close"        # "close" or "high_low"
    box_size_type: str = "default"     # "fixed", "default", "points", "percentage"
    box_size: float = 0.0              # Ignored by "default" sizing
    reversal_count: int = 3            # Boxes needed to reverse
    track_trend_lines: bool = True

    @classmethod
    def from_dict(cls, values: dict[str, Any]) -> "ChartParams":
        """Build params from a merged config section, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in values.items() if k in known})


@dataclass(frozen=True)
class IndicatorParams:
    """Indicator suite parameters."""
    sma_short_period: int = 5
    sma_long_period: int = 10
    bands_period: int = 5
    bands_std_devs: float = 2.0
    sr_threshold: float = 0.01         # Relative distance for level merging
    sr_tolerance: float = 0.02         # Relative distance for proximity queries
    significant_touches: int = 3

    @classmethod
    def from_dict(cls, values: dict[str, Any]) -> "IndicatorParams":
        """Build params from a merged config section, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in values.items() if k in known})


@dataclass(frozen=True)
class LoggingParams:
    """Logging parameters, applied through configure_logging."""
    level: str = "INFO"
    format_json: bool = False
    include_timestamp: bool = True
    include_caller: bool = False

    @classmethod
    def from_dict(cls, values: dict[str, Any]) -> "LoggingParams":
        """Build params from a merged config section, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in values.items() if k in known})


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    chart: ChartParams
    indicators: IndicatorParams
    logging: LoggingParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        chart=ChartParams(),
        indicators=IndicatorParams(),
        logging=LoggingParams(),
    )
