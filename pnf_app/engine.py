"""
Main chart engine coordinator.

Builds a chart from merged configuration, feeds it observation records,
recomputes indicators on demand and exposes a read-only snapshot for export
and visualization collaborators.
"""

from pathlib import Path
from typing import Any, Optional, Union

import structlog

from .chart.construction import PointAndFigureChart
from .config.defaults import ChartParams, IndicatorParams, LoggingParams
from .config.loader import ConfigLoader
from .config.validation import ConfigValidator
from .data.models import Observation
from .data.validators import parse_observation
from .errors import ConfigurationError, DataQualityError
from .indicators.calculator import PnFIndicators
from .logging.config import configure_logging
from .utils.time import format_market_time

logger = structlog.get_logger(__name__)


class ChartEngine:
    """
    Coordinator for one symbol's chart and indicator suite.

    Pipeline:
    Observation record → Validation → Chart construction → Trend lines → Indicators
    """

    def __init__(
        self,
        symbol: str,
        overrides: Optional[dict[str, Any]] = None,
        config_dir: Optional[Path] = None
    ) -> None:
        self.symbol = symbol
        self.config_loader = ConfigLoader.create(config_dir)

        config = self.config_loader.merge_config(symbol, overrides)
        validation_errors = ConfigValidator.validate_config(config)
        if validation_errors:
            error_msgs = [f"{err.field}: {err.message} (got: {err.value})" for err in validation_errors]
            logger.error("Chart configuration validation failed", symbol=symbol, errors=error_msgs)
            first = validation_errors[0]
            raise ConfigurationError(
                f"Invalid configuration for {symbol}: {'; '.join(error_msgs)}",
                field=first.field,
                value=first.value
            )

        self.chart_params = ChartParams.from_dict(config.get("chart", {}))
        self.indicator_params = IndicatorParams.from_dict(config.get("indicators", {}))
        self.logging_params = LoggingParams.from_dict(config.get("logging", {}))
        configure_logging(
            level=self.logging_params.level,
            format_json=self.logging_params.format_json,
            include_timestamp=self.logging_params.include_timestamp,
            include_caller=self.logging_params.include_caller
        )

        self.chart = PointAndFigureChart.from_params(self.chart_params)
        self.indicators = PnFIndicators(self.indicator_params)
        self.observations_processed = 0
        self.observations_rejected = 0

        logger.info(
            "Chart engine initialized",
            symbol=symbol,
            construction=self.chart_params.construction,
            box_size_type=self.chart_params.box_size_type,
            box_size=self.chart_params.box_size,
            reversal_count=self.chart_params.reversal_count
        )

    def process_observation(self, record: Union[Observation, dict[str, Any]]) -> bool:
        """
        Feed one observation record to the chart.

        Args:
            record: Observation, or a raw {timestamp, open, high, low, close} dict

        Returns:
            True if any box was added

        Raises:
            DataQualityError: If the record is rejected; the chart is unchanged
        """
        try:
            observation = record if isinstance(record, Observation) else parse_observation(record)
            added = self.chart.add_record(observation)
        except DataQualityError as e:
            self.observations_rejected += 1
            logger.warning(
                "Observation rejected",
                symbol=self.symbol,
                error_type=type(e).__name__,
                error=str(e),
                context=e.context
            )
            raise

        self.observations_processed += 1
        return added

    def process_observations(self, records: list[Union[Observation, dict[str, Any]]]) -> int:
        """Feed records in order; returns how many the chart reported as recorded."""
        return sum(1 for record in records if self.process_observation(record))

    def calculate_indicators(self) -> PnFIndicators:
        """Recompute all indicators over the chart's current columns."""
        self.indicators.calculate(self.chart)
        return self.indicators

    def snapshot(self) -> dict[str, Any]:
        """Read-only view of chart and indicator state as plain data."""
        chart = self.chart
        manager = chart.trend_line_manager

        columns = [
            {
                "index": i,
                "type": column.column_type.value,
                "box_size": column.box_size,
                "last_update": format_market_time(column.last_update),
                "boxes": [
                    {"price": box.price, "direction": box.box_type.value, "marker": box.marker}
                    for box in column
                ],
            }
            for i, column in enumerate(chart.columns)
        ]

        trend_lines = []
        if manager is not None:
            trend_lines = [
                {
                    "type": line.line_type.value,
                    "active": line.is_active,
                    "start": {"column_index": line.start_point.column_index,
                              "price": line.start_point.price},
                    "end": {"column_index": line.end_point.column_index,
                            "price": line.end_point.price},
                    "touch_count": line.touch_count,
                }
                for line in manager.trend_lines
            ]

        indicators = self.indicators
        return {
            "symbol": self.symbol,
            "construction": chart.construction_type.value,
            "box_size_type": chart.box_size_type.value,
            "box_size": chart.box_size,
            "reversal_count": chart.reversal_count,
            "columns": columns,
            "prices": chart.get_all_prices(),
            "trend_lines": trend_lines,
            "indicators": {
                "sma_short": indicators.sma_short.values,
                "sma_long": indicators.sma_long.values,
                "bands": {
                    "middle": indicators.bollinger_bands.middle_band,
                    "upper": indicators.bollinger_bands.upper_band,
                    "lower": indicators.bollinger_bands.lower_band,
                },
                "current_signal": indicators.signal_detector.current_signal.value,
                "support_resistance": [
                    {"price": level.price, "is_support": level.is_support,
                     "touch_count": level.touch_count}
                    for level in indicators.support_resistance.levels
                ],
            },
        }
