"""Box size determination and price rounding."""

import math
from typing import Optional

from .models import BoxSizeType

# (upper bound exclusive, box size) for the tiered default scheme
DEFAULT_BOX_SIZE_TIERS = (
    (0.25, 0.0625),
    (1.0, 0.125),
    (5.0, 0.25),
    (20.0, 0.5),
    (100.0, 1.0),
    (200.0, 2.0),
    (500.0, 4.0),
    (1000.0, 5.0),
    (25000.0, 50.0),
)
DEFAULT_BOX_SIZE_CEILING = 500.0

# Absorbs float noise in price / box_size before ceil/floor (0.3 / 0.1 -> 2.9999...)
ROUNDING_EPSILON = 1e-9

# Decimal places box prices are normalized to
PRICE_PRECISION = 10


def default_box_size(price: float) -> float:
    """Tiered box size by absolute price magnitude."""
    for upper, size in DEFAULT_BOX_SIZE_TIERS:
        if price < upper:
            return size
    return DEFAULT_BOX_SIZE_CEILING


def normalize_price(price: float) -> float:
    """Strip accumulated float noise from a computed box price."""
    return round(price, PRICE_PRECISION)


class BoxSizePolicy:
    """
    Computes the box size for a price under one sizing scheme.

    Under DEFAULT sizing the policy remembers the size implied by the last
    price it saw; that remembered size is what the chart reports as its
    current box size.
    """

    def __init__(self, box_size_type: BoxSizeType, box_size: float = 0.0):
        self.box_size_type = box_size_type
        self.box_size = box_size

    def box_size_for(self, price: float) -> float:
        if self.box_size_type in (BoxSizeType.FIXED, BoxSizeType.POINTS):
            return self.box_size

        if self.box_size_type == BoxSizeType.PERCENTAGE:
            return price * self.box_size / 100.0

        self.box_size = default_box_size(price)
        return self.box_size

    def round_to_box_size(self, price: float, round_up: bool, box_size: Optional[float] = None) -> float:
        """
        Round price to a multiple of the box size.

        Args:
            price: Price to round
            round_up: Ceiling when True, floor otherwise
            box_size: Size to round against; computed from price when omitted
        """
        size = box_size if box_size is not None else self.box_size_for(price)
        ratio = price / size
        if round_up:
            steps = math.ceil(ratio - ROUNDING_EPSILON)
        else:
            steps = math.floor(ratio + ROUNDING_EPSILON)
        return normalize_price(steps * size)
