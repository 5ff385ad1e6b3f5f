"""Indicator suite coordinating all calculations over one chart"""

from typing import Optional

from ..chart.construction import PointAndFigureChart
from ..config.defaults import IndicatorParams
from ..logging.config import get_logger
from .bands import PnFBollingerBands
from .moving_average import PnFMovingAverage
from .patterns import PnFPatternRecognizer
from .price_objective import PnFPriceObjective
from .signals import PnFSignalDetector
from .support_resistance import PnFSupportResistance

logger = get_logger(__name__)


class PnFIndicators:
    """
    Owns one instance of every indicator and recomputes them together.

    Indicators are not kept in sync with the chart; call calculate after
    feeding observations.
    """

    def __init__(self, params: Optional[IndicatorParams] = None):
        self.params = params or IndicatorParams()

        self.sma_short = PnFMovingAverage(self.params.sma_short_period)
        self.sma_long = PnFMovingAverage(self.params.sma_long_period)
        self.bollinger_bands = PnFBollingerBands(self.params.bands_period, self.params.bands_std_devs)
        self.signal_detector = PnFSignalDetector()
        self.pattern_recognizer = PnFPatternRecognizer()
        self.support_resistance = PnFSupportResistance(self.params.sr_threshold,
                                                       self.params.sr_tolerance)
        self.price_objective = PnFPriceObjective()

    def calculate(self, chart: PointAndFigureChart) -> None:
        """Recompute every indicator from the chart's current columns."""
        if chart.column_count == 0:
            logger.debug("Skipping indicator calculation, chart has no columns")
            return

        self.sma_short.calculate(chart)
        self.sma_long.calculate(chart)
        self.bollinger_bands.calculate(chart)
        self.signal_detector.detect_signals(chart)
        self.pattern_recognizer.detect_patterns(chart)
        self.support_resistance.identify_levels(chart)
        self.price_objective.calculate(chart)

        logger.debug(
            "Indicators calculated",
            columns=chart.column_count,
            signals=len(self.signal_detector.signals),
            patterns=len(self.pattern_recognizer.patterns),
            levels=len(self.support_resistance.levels),
            current_signal=self.signal_detector.current_signal.value
        )

    def summary(self) -> str:
        lines = ["=== P&F INDICATORS SUMMARY ===", ""]

        if self.signal_detector.has_buy_signal():
            current = "BUY"
        elif self.signal_detector.has_sell_signal():
            current = "SELL"
        else:
            current = "NONE"
        lines.append(f"CURRENT SIGNAL: {current}")

        latest = self.pattern_recognizer.latest_pattern()
        lines.append("")
        lines.append(f"LATEST PATTERN: {latest.name if latest is not None else 'None detected'}")

        lines.append("")
        lines.append(f"BULLISH PATTERNS: {len(self.pattern_recognizer.bullish_patterns())}")
        lines.append(f"BEARISH PATTERNS: {len(self.pattern_recognizer.bearish_patterns())}")

        significant = self.support_resistance.significant_levels(self.params.significant_touches)
        lines.append("")
        lines.append(f"SIGNIFICANT S/R LEVELS: {len(significant)}")

        objective = self.price_objective.latest_objective()
        if objective is not None:
            direction = "Bullish" if objective.is_bullish else "Bearish"
            lines.append("")
            lines.append(f"LATEST PRICE TARGET: {objective.target_price:.5f} ({direction})")

        return "\n".join(lines)

    def __str__(self) -> str:
        sections = [
            "=== POINT & FIGURE INDICATORS ===",
            "MOVING AVERAGES:",
            str(self.sma_short),
            str(self.sma_long),
            "BOLLINGER BANDS:",
            str(self.bollinger_bands),
            "SIGNALS:",
            str(self.signal_detector),
            "PATTERNS:",
            str(self.pattern_recognizer),
            "SUPPORT & RESISTANCE:",
            str(self.support_resistance),
            "PRICE OBJECTIVES:",
            str(self.price_objective),
        ]
        return "\n".join(sections)
