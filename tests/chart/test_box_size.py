"""Tests for box sizing and price rounding"""

import pytest

from pnf_app.chart.box_size import BoxSizePolicy, default_box_size
from pnf_app.chart.models import BoxSizeType


class TestDefaultBoxSize:
    """Test the tiered default box size table"""

    @pytest.mark.parametrize("price,expected", [
        (0.1, 0.0625),
        (0.25, 0.125),
        (0.9, 0.125),
        (4.99, 0.25),
        (10.0, 0.5),
        (50.0, 1.0),
        (150.0, 2.0),
        (300.0, 4.0),
        (999.0, 5.0),
        (20000.0, 50.0),
        (25000.0, 500.0),
        (100000.0, 500.0),
    ])
    def test_tiers(self, price, expected):
        """Test that each price falls into the expected tier"""
        assert default_box_size(price) == expected


class TestBoxSizePolicy:
    """Test box size per sizing scheme"""

    def test_fixed_returns_constant(self):
        policy = BoxSizePolicy(BoxSizeType.FIXED, 0.5)
        assert policy.box_size_for(10.0) == 0.5
        assert policy.box_size_for(10000.0) == 0.5

    def test_points_returns_constant(self):
        policy = BoxSizePolicy(BoxSizeType.POINTS, 2.0)
        assert policy.box_size_for(123.0) == 2.0

    def test_percentage_scales_with_price(self):
        policy = BoxSizePolicy(BoxSizeType.PERCENTAGE, 1.0)
        assert policy.box_size_for(200.0) == pytest.approx(2.0)
        assert policy.box_size_for(50.0) == pytest.approx(0.5)

    def test_default_remembers_last_size(self):
        """Test that default sizing updates the remembered box size"""
        policy = BoxSizePolicy(BoxSizeType.DEFAULT)
        assert policy.box_size_for(50.0) == 1.0
        assert policy.box_size == 1.0

        policy.box_size_for(150.0)
        assert policy.box_size == 2.0


class TestRounding:
    """Test rounding to box multiples"""

    def test_round_up_and_down(self):
        policy = BoxSizePolicy(BoxSizeType.FIXED, 1.0)
        assert policy.round_to_box_size(101.5, True) == 102.0
        assert policy.round_to_box_size(101.5, False) == 101.0

    def test_exact_multiple_unchanged(self):
        policy = BoxSizePolicy(BoxSizeType.FIXED, 1.0)
        assert policy.round_to_box_size(101.0, True) == 101.0
        assert policy.round_to_box_size(101.0, False) == 101.0

    def test_float_noise_does_not_shift_a_box(self):
        """Test that 0.3 / 0.1 rounds to three boxes in both directions"""
        policy = BoxSizePolicy(BoxSizeType.FIXED, 0.1)
        assert policy.round_to_box_size(0.3, True) == 0.3
        assert policy.round_to_box_size(0.3, False) == 0.3

    def test_explicit_box_size_overrides_policy(self):
        policy = BoxSizePolicy(BoxSizeType.FIXED, 1.0)
        assert policy.round_to_box_size(101.0, False, box_size=5.0) == 100.0
        assert policy.round_to_box_size(101.3, True, box_size=0.5) == 101.5
        assert policy.round_to_box_size(101.5, False, box_size=None) == 101.0
