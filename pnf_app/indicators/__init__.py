"""Indicator suite computed in batch over a chart's column history"""

from .bands import PnFBollingerBands
from .calculator import PnFIndicators
from .moving_average import PnFMovingAverage
from .patterns import PnFPatternRecognizer, is_bearish_pattern, is_bullish_pattern, pattern_type_to_string
from .price_objective import PnFPriceObjective
from .signals import PnFSignalDetector
from .support_resistance import PnFSupportResistance

__all__ = [
    "PnFIndicators",
    "PnFMovingAverage",
    "PnFBollingerBands",
    "PnFSignalDetector",
    "PnFPatternRecognizer",
    "PnFSupportResistance",
    "PnFPriceObjective",
    "is_bullish_pattern",
    "is_bearish_pattern",
    "pattern_type_to_string",
]
