"""Tests for the point-and-figure construction engine"""

import math
from datetime import datetime, timedelta, timezone

import pytest

from pnf_app.chart.construction import PointAndFigureChart
from pnf_app.chart.models import BoxSizeType, BoxType, ColumnType, ConstructionType
from pnf_app.config.defaults import ChartParams
from pnf_app.errors import ColumnIndexError, ConfigurationError, MalformedDataError, TemporalDataError


def utc(year, month, day):
    return datetime(year, month, day, tzinfo=timezone.utc)


class TestClosePriceConstruction:
    """Test column formation from close prices"""

    def test_rising_prices_extend_single_column(self, fixed_chart, feed):
        """Test that 100, 101, 102 builds one X column of three boxes"""
        results = feed(fixed_chart, [100, 101, 102])

        assert results == [True, True, True]
        assert fixed_chart.column_count == 1
        column = fixed_chart.get_last_column()
        assert column.column_type == ColumnType.X
        assert column.box_count == 3
        assert column.highest_price == 102.0

    def test_three_box_drop_reverses(self, fixed_chart, feed):
        """Test that a drop of three boxes from the high starts an O column"""
        feed(fixed_chart, [100, 101, 102, 99])

        assert fixed_chart.column_count == 2
        column = fixed_chart.get_last_column()
        assert column.column_type == ColumnType.O
        assert [box.price for box in column] == [101.0, 100.0, 99.0]
        assert all(box.box_type == BoxType.O for box in column)

    def test_small_pullback_changes_nothing(self, fixed_chart, feed):
        """Test that a pullback short of the reversal is recorded without new boxes"""
        results = feed(fixed_chart, [100, 105, 103])

        assert results[-1] is True
        assert fixed_chart.get_last_column().box_count == 6
        assert fixed_chart.last_observation_time is not None
        assert fixed_chart.column_count == 1
        assert fixed_chart.get_last_column().highest_price == 105.0

    def test_one_box_pullback_is_accepted(self, fixed_chart, feed):
        """Test that an observation inside the current column still reports success"""
        results = feed(fixed_chart, [100, 101, 102, 101])

        assert results == [True, True, True, True]
        assert fixed_chart.get_last_column().box_count == 3

    def test_prices_within_one_box_stay_in_one_column(self, fixed_chart, feed):
        feed(fixed_chart, [100.0, 100.2, 100.5, 100.9, 101.3])
        assert fixed_chart.column_count == 1

    def test_o_column_reverses_up(self, fixed_chart, feed):
        feed(fixed_chart, [105, 101, 104])

        assert fixed_chart.column_count == 3
        column = fixed_chart.get_last_column()
        assert column.column_type == ColumnType.X
        assert [box.price for box in column] == [102.0, 103.0, 104.0]

    def test_o_column_extends_down(self, fixed_chart, feed):
        feed(fixed_chart, [105, 101, 99.5])

        column = fixed_chart.get_last_column()
        assert column.column_type == ColumnType.O
        assert column.lowest_price == 99.0

    def test_fractional_box_size_is_stable(self, feed):
        """Test that decimal box sizes produce clean box prices"""
        chart = PointAndFigureChart(ConstructionType.CLOSE, BoxSizeType.FIXED, 0.1, 3)
        feed(chart, [1.0, 1.3, 1.0])

        assert chart.column_count == 2
        assert [box.price for box in chart.get_column(0)] == [1.0, 1.1, 1.2, 1.3]
        assert [box.price for box in chart.get_column(1)] == [1.2, 1.1, 1.0]

    def test_columns_record_box_size_and_update_time(self, zigzag_chart, start_time):
        column = zigzag_chart.get_column(5)
        assert column.box_size == 1.0
        assert column.last_update == start_time + timedelta(days=5)


class TestHighLowConstruction:
    """Test column formation from high/low ranges"""

    def test_first_column_seeds_from_high(self):
        chart = PointAndFigureChart(ConstructionType.HIGH_LOW, BoxSizeType.FIXED, 1.0, 3)
        chart.add_observation(105.4, 100.0, 103.0, utc(2024, 1, 2))

        assert chart.get_last_column().highest_price == 105.0

    def test_high_extends_x_column(self):
        chart = PointAndFigureChart(ConstructionType.HIGH_LOW, BoxSizeType.FIXED, 1.0, 3)
        chart.add_observation(105, 100, 103, utc(2024, 1, 2))
        assert chart.add_observation(108, 104, 107, utc(2024, 1, 3)) is True

        assert chart.column_count == 1
        assert chart.get_last_column().highest_price == 108.0

    def test_high_reversal_governs(self):
        """Test that when the high reverses, the low does not extend the new column"""
        chart = PointAndFigureChart(ConstructionType.HIGH_LOW, BoxSizeType.FIXED, 1.0, 3)
        chart.add_observation(105, 100, 103, utc(2024, 1, 2))
        chart.add_observation(101, 98, 99, utc(2024, 1, 3))

        column = chart.get_last_column()
        assert column.column_type == ColumnType.O
        assert column.lowest_price == 101.0

    def test_low_reversal_when_high_does_not_reverse(self):
        chart = PointAndFigureChart(ConstructionType.HIGH_LOW, BoxSizeType.FIXED, 1.0, 3)
        chart.add_observation(105, 100, 103, utc(2024, 1, 2))
        chart.add_observation(106, 101, 102, utc(2024, 1, 3))

        assert chart.column_count == 2
        column = chart.get_last_column()
        assert column.column_type == ColumnType.O
        assert [box.price for box in column] == [104.0, 103.0, 102.0, 101.0]

    def test_inverted_range_rejected(self):
        chart = PointAndFigureChart(ConstructionType.HIGH_LOW, BoxSizeType.FIXED, 1.0, 3)
        with pytest.raises(MalformedDataError):
            chart.add_observation(99, 100, 99.5, utc(2024, 1, 2))
        assert chart.column_count == 0


class TestMixedColumns:
    """Test one-box reversal charts"""

    def test_one_box_reversal_creates_mixed_columns(self, feed):
        chart = PointAndFigureChart(ConstructionType.CLOSE, BoxSizeType.FIXED, 1.0, 1)
        feed(chart, [100, 102, 101, 100, 98])

        assert [c.column_type for c in chart.columns] == [ColumnType.X, ColumnType.MIXED, ColumnType.MIXED]
        assert [box.price for box in chart.get_column(1)] == [101.0, 100.0]
        assert [box.price for box in chart.get_column(2)] == [100.0, 99.0, 98.0]
        assert chart.mixed_column_count() == 2
        assert chart.mixed_column_indices() == [1, 2]


class TestMonthMarkers:
    """Test month marker placement"""

    def test_first_box_gets_month_marker(self, fixed_chart):
        fixed_chart.add_price(100, utc(2024, 1, 2))
        assert fixed_chart.get_column(0).box_at(0).marker == "1"

    def test_marker_only_on_month_change(self, fixed_chart):
        fixed_chart.add_price(100, utc(2024, 1, 2))
        fixed_chart.add_price(101, utc(2024, 1, 3))
        fixed_chart.add_price(103, utc(2024, 2, 1))

        markers = [box.marker for box in fixed_chart.get_column(0)]
        assert markers == ["1", "", "2", ""]

    def test_late_year_months_use_letters(self, fixed_chart):
        fixed_chart.add_price(100, utc(2024, 9, 30))
        fixed_chart.add_price(101, utc(2024, 10, 1))
        fixed_chart.add_price(102, utc(2024, 11, 1))
        fixed_chart.add_price(103, utc(2024, 12, 1))

        markers = [box.marker for box in fixed_chart.get_column(0)]
        assert markers == ["9", "A", "B", "C"]

    def test_reversal_column_first_box_marked(self, fixed_chart):
        fixed_chart.add_price(102, utc(2024, 2, 1))
        fixed_chart.add_price(99, utc(2024, 3, 1))

        column = fixed_chart.get_column(1)
        assert [box.marker for box in column] == ["3", "", ""]

    def test_same_month_next_year_is_marked(self, fixed_chart):
        fixed_chart.add_price(100, utc(2024, 1, 2))
        fixed_chart.add_price(101, utc(2025, 1, 2))
        assert fixed_chart.get_column(0).get_box_marker(101.0) == "1"

    def test_is_month_marker(self, fixed_chart):
        assert fixed_chart.is_month_marker("A") is True
        assert fixed_chart.is_month_marker("X") is False
        assert fixed_chart.is_month_marker("") is False


class TestObservationValidation:
    """Test rejection of unusable observations"""

    @pytest.mark.parametrize("price", [0, -1.0, math.nan, math.inf, "abc", None, True])
    def test_invalid_price_rejected(self, fixed_chart, price):
        with pytest.raises(MalformedDataError):
            fixed_chart.add_price(price, utc(2024, 1, 2))
        assert fixed_chart.column_count == 0

    def test_backwards_timestamp_rejected(self, fixed_chart):
        fixed_chart.add_price(100, utc(2024, 1, 3))
        with pytest.raises(TemporalDataError):
            fixed_chart.add_price(101, utc(2024, 1, 2))
        assert fixed_chart.get_last_column().box_count == 1

    def test_equal_timestamp_accepted(self, fixed_chart):
        fixed_chart.add_price(100, utc(2024, 1, 3))
        assert fixed_chart.add_price(101, utc(2024, 1, 3)) is True

    def test_mixed_naive_and_aware_timestamps_rejected(self, fixed_chart):
        fixed_chart.add_price(100, utc(2024, 1, 3))
        with pytest.raises(MalformedDataError):
            fixed_chart.add_price(101, datetime(2024, 1, 4))

    def test_epoch_ms_and_iso_timestamps(self, fixed_chart):
        fixed_chart.add_price(100, "2024-01-02T00:00:00Z")
        fixed_chart.add_price(101, int(utc(2024, 1, 3).timestamp() * 1000))

        assert fixed_chart.get_last_column().box_count == 2
        assert fixed_chart.last_observation_time == utc(2024, 1, 3)


class TestTrendLineManagerAbsent:
    """Test reversals on charts without trend line tracking"""

    def test_reversal_recorded_but_returns_false(self, feed):
        chart = PointAndFigureChart(ConstructionType.CLOSE, BoxSizeType.FIXED, 1.0, 3,
                                    track_trend_lines=False)
        results = feed(chart, [100, 101, 102, 99])

        assert results == [True, True, True, False]
        assert chart.column_count == 2
        assert chart.trend_line_manager is None
        assert chart.last_observation_time is not None
        assert chart.has_bullish_bias() is False
        assert chart.is_above_bullish_support(200.0) is False


class TestBoxSizing:
    """Test sizing schemes applied by the chart"""

    def test_default_sizing_from_price(self):
        chart = PointAndFigureChart()
        chart.add_price(50.3, utc(2024, 1, 2))

        assert chart.box_size == 1.0
        assert chart.get_last_column().highest_price == 50.0

    def test_percentage_sizing(self):
        chart = PointAndFigureChart(ConstructionType.CLOSE, BoxSizeType.PERCENTAGE, 1.0, 3)
        chart.add_price(200.0, utc(2024, 1, 2))

        column = chart.get_last_column()
        assert column.box_size == pytest.approx(2.0)
        assert column.highest_price == pytest.approx(200.0)

    def test_box_size_helpers(self, fixed_chart):
        assert fixed_chart.box_size_for(100.0) == 1.0
        assert fixed_chart.round_to_box_size(100.4, True) == 101.0


class TestConfiguration:
    """Test chart configuration validation and setters"""

    def test_string_configuration_accepted(self):
        chart = PointAndFigureChart("high_low", "fixed", 0.5, 2)
        assert chart.construction_type == ConstructionType.HIGH_LOW
        assert chart.box_size_type == BoxSizeType.FIXED
        assert chart.reversal_count == 2

    @pytest.mark.parametrize("kwargs", [
        {"box_size_type": BoxSizeType.FIXED, "box_size": 0.0},
        {"box_size_type": BoxSizeType.PERCENTAGE, "box_size": -1.0},
        {"box_size_type": BoxSizeType.DEFAULT, "box_size": -2.0},
        {"reversal_count": 0},
        {"reversal_count": 2.5},
        {"construction_type": "weekly"},
        {"box_size_type": "log"},
    ])
    def test_invalid_configuration_rejected(self, kwargs):
        with pytest.raises(ConfigurationError):
            PointAndFigureChart(**kwargs)

    def test_default_sizing_allows_zero_box_size(self):
        chart = PointAndFigureChart(box_size_type=BoxSizeType.DEFAULT, box_size=0.0)
        assert chart.box_size == 0.0

    def test_default_sizing_rejects_negative_setter(self):
        chart = PointAndFigureChart(box_size_type=BoxSizeType.DEFAULT)
        with pytest.raises(ConfigurationError):
            chart.set_box_size(-0.5)
        assert chart.box_size == 0.0

    def test_setters_validate(self, fixed_chart):
        with pytest.raises(ConfigurationError):
            fixed_chart.set_box_size(0.0)
        with pytest.raises(ConfigurationError):
            fixed_chart.set_reversal_count(0)
        with pytest.raises(ConfigurationError):
            fixed_chart.set_construction_type("bogus")

    def test_setters_apply_to_later_observations(self, fixed_chart, feed):
        feed(fixed_chart, [100, 102])
        fixed_chart.set_box_size(2.0)
        fixed_chart.set_reversal_count(2)
        fixed_chart.set_box_size_type("points")

        assert fixed_chart.box_size == 2.0
        assert fixed_chart.reversal_count == 2
        assert fixed_chart.box_size_type == BoxSizeType.POINTS
        assert [box.price for box in fixed_chart.get_column(0)] == [100.0, 101.0, 102.0]

    def test_from_params(self):
        params = ChartParams(construction="high_low", box_size_type="fixed", box_size=0.5,
                             reversal_count=2, track_trend_lines=False)
        chart = PointAndFigureChart.from_params(params)

        assert chart.construction_type == ConstructionType.HIGH_LOW
        assert chart.box_size == 0.5
        assert chart.trend_line_manager is None


class TestChartQueries:
    """Test read-only chart queries"""

    def test_all_prices_descending_and_distinct(self, fixed_chart, feed):
        feed(fixed_chart, [100, 101, 102, 99])
        assert fixed_chart.get_all_prices() == [102.0, 101.0, 100.0, 99.0]

    def test_all_prices_shared_across_columns(self, zigzag_chart):
        """Test that prices repeated in several columns appear once"""
        assert zigzag_chart.get_all_prices() == [float(p) for p in range(107, 99, -1)]

    def test_all_prices_fractional_box(self, feed):
        chart = PointAndFigureChart(ConstructionType.CLOSE, BoxSizeType.FIXED, 0.1, 3)
        feed(chart, [1.0, 1.3, 1.0])
        assert chart.get_all_prices() == [1.3, 1.2, 1.1, 1.0]

    def test_column_indices_by_type(self, zigzag_chart):
        assert zigzag_chart.x_column_indices() == [0, 2, 4]
        assert zigzag_chart.o_column_indices() == [1, 3, 5]
        assert zigzag_chart.x_column_count() == 3
        assert zigzag_chart.o_column_count() == 3
        assert zigzag_chart.mixed_column_count() == 0

    def test_get_column_out_of_range_raises(self, zigzag_chart):
        with pytest.raises(ColumnIndexError):
            zigzag_chart.get_column(6)
        with pytest.raises(ColumnIndexError):
            zigzag_chart.get_column(-1)

    def test_last_column_none_when_empty(self, fixed_chart):
        assert fixed_chart.get_last_column() is None

    def test_no_bias_takes_both_directions(self, fixed_chart):
        assert fixed_chart.should_take_bullish_signals() is True
        assert fixed_chart.should_take_bearish_signals() is True

    def test_clear(self, zigzag_chart):
        zigzag_chart.clear()

        assert zigzag_chart.column_count == 0
        assert zigzag_chart.last_observation_time is None
        assert zigzag_chart.trend_line_manager.trend_lines == []

    def test_str(self, fixed_chart, feed):
        feed(fixed_chart, [100, 101, 102, 99])
        text = str(fixed_chart)

        assert text.startswith("Point & Figure Chart")
        assert "Columns: 2" in text
        assert "Column Type: O, Boxes: 3" in text
