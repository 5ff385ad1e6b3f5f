"""Unit tests for configuration management."""

import pytest
from pathlib import Path

from pnf_app.config.defaults import ChartParams, IndicatorParams, LoggingParams, get_default_config
from pnf_app.config.loader import ConfigLoader
from pnf_app.config.validation import ConfigValidator


@pytest.fixture
def charts_dir(tmp_path: Path) -> Path:
    (tmp_path / "charts.yaml").write_text(
        "symbols:\n"
        "  BTCUSD:\n"
        "    chart:\n"
        "      box_size_type: points\n"
        "      box_size: 50.0\n"
        "    indicators:\n"
        "      sma_short_period: 3\n"
    )
    return tmp_path


class TestDefaultConfig:
    """Test suite for default configuration."""

    def test_default_config_creation(self) -> None:
        """Test that default configuration can be created."""
        config = get_default_config()
        assert config.chart.construction == "close"
        assert config.chart.box_size_type == "default"
        assert config.chart.reversal_count == 3
        assert config.chart.track_trend_lines is True
        assert config.indicators.sma_short_period == 5
        assert config.indicators.sma_long_period == 10
        assert config.indicators.sr_threshold == 0.01
        assert config.logging.level == "INFO"
        assert config.logging.format_json is False

    def test_from_dict_ignores_unknown_keys(self) -> None:
        """Test that params ignore keys they do not define."""
        params = ChartParams.from_dict({"reversal_count": 2, "comment": "ignored"})
        assert params.reversal_count == 2
        assert IndicatorParams.from_dict({}) == IndicatorParams()
        assert LoggingParams.from_dict({"level": "DEBUG", "rotate": True}) == LoggingParams(level="DEBUG")


class TestConfigLoader:
    """Test suite for configuration loader."""

    def test_config_loader_creation(self) -> None:
        """Test that ConfigLoader points at the bundled config directory."""
        loader = ConfigLoader.create()
        assert isinstance(loader.config_dir, Path)
        assert loader.config_dir.name == "config"

    def test_merge_config_defaults_only(self, charts_dir: Path) -> None:
        """Test config merging for a symbol with no overrides."""
        config = ConfigLoader.create(charts_dir).merge_config("UNKNOWN")

        assert config["chart"]["construction"] == "close"
        assert config["indicators"]["bands_period"] == 5

    def test_symbol_config_overrides_defaults(self, charts_dir: Path) -> None:
        """Test that charts.yaml entries replace defaults key by key."""
        config = ConfigLoader.create(charts_dir).merge_config("BTCUSD")

        assert config["chart"]["box_size_type"] == "points"
        assert config["chart"]["box_size"] == 50.0
        assert config["chart"]["reversal_count"] == 3
        assert config["indicators"]["sma_short_period"] == 3
        assert config["indicators"]["sma_long_period"] == 10

    def test_call_overrides_win(self, charts_dir: Path) -> None:
        """Test that per-call overrides take precedence over charts.yaml."""
        config = ConfigLoader.create(charts_dir).merge_config(
            "BTCUSD", {"chart": {"box_size": 25.0}}
        )

        assert config["chart"]["box_size"] == 25.0
        assert config["chart"]["box_size_type"] == "points"

    def test_missing_charts_file(self, tmp_path: Path) -> None:
        """Test that a directory without charts.yaml yields no symbol overrides."""
        assert ConfigLoader.create(tmp_path).load_symbol_config("BTCUSD") == {}

    def test_repository_symbol_config(self) -> None:
        """Test the shipped EURUSD entry."""
        config = ConfigLoader.create().merge_config("EURUSD")

        assert config["chart"]["construction"] == "high_low"
        assert config["chart"]["box_size_type"] == "fixed"
        assert config["chart"]["box_size"] == 0.001


class TestConfigValidator:
    """Test suite for configuration validator."""

    def test_defaults_are_valid(self) -> None:
        """Test that merged defaults pass validation."""
        config = ConfigLoader.create().merge_config("UNKNOWN")
        assert ConfigValidator.validate_config(config) == []

    @pytest.mark.parametrize("field,value", [
        ("construction", "open"),
        ("box_size_type", "atr"),
        ("reversal_count", 0),
        ("reversal_count", 2.5),
        ("track_trend_lines", "yes"),
        ("box_size", "large"),
    ])
    def test_invalid_chart_params(self, field: str, value: object) -> None:
        """Test that each bad chart parameter is reported against its field."""
        errors = ConfigValidator.validate_chart_params({field: value})
        assert [e.field for e in errors] == [field]

    def test_box_size_must_be_positive_unless_default(self) -> None:
        """Test that non-default sizing needs a positive box size."""
        assert ConfigValidator.validate_chart_params({"box_size_type": "fixed", "box_size": 0.0})
        assert ConfigValidator.validate_chart_params({"box_size_type": "default", "box_size": 0.0}) == []
        assert ConfigValidator.validate_chart_params({"box_size_type": "default", "box_size": -1.0})

    @pytest.mark.parametrize("field,value", [
        ("sma_short_period", 0),
        ("bands_period", -1),
        ("bands_std_devs", -0.5),
        ("sr_threshold", 0.0),
        ("sr_tolerance", 1.5),
        ("significant_touches", True),
    ])
    def test_invalid_indicator_params(self, field: str, value: object) -> None:
        """Test that each bad indicator parameter is reported against its field."""
        errors = ConfigValidator.validate_indicator_params({field: value})
        assert len(errors) == 1
        assert errors[0].field == field
        assert errors[0].value == value

    @pytest.mark.parametrize("field,value", [
        ("level", "LOUD"),
        ("level", 10),
        ("format_json", "true"),
        ("include_timestamp", 1),
        ("include_caller", None),
    ])
    def test_invalid_logging_params(self, field: str, value: object) -> None:
        """Test that each bad logging parameter is reported against its field."""
        errors = ConfigValidator.validate_logging_params({field: value})
        assert [e.field for e in errors] == [field]

    def test_logging_level_is_case_insensitive(self) -> None:
        """Test that lower-case level names are accepted."""
        assert ConfigValidator.validate_logging_params({"level": "debug", "format_json": True}) == []
        errors = ConfigValidator.validate_config({"logging": {"level": "LOUD"}})
        assert [e.field for e in errors] == ["level"]
