"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

CONSTRUCTION_TYPES = ("close", "high_low")
BOX_SIZE_TYPES = ("fixed", "default", "points", "percentage")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_chart_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate chart construction parameters."""
        errors = []

        if "construction" in params:
            value = params["construction"]
            if value not in CONSTRUCTION_TYPES:
                errors.append(ValidationError(
                    field="construction",
                    message=f"Must be one of {', '.join(CONSTRUCTION_TYPES)}",
                    value=value
                ))

        box_size_type = params.get("box_size_type", "default")
        if "box_size_type" in params and box_size_type not in BOX_SIZE_TYPES:
            errors.append(ValidationError(
                field="box_size_type",
                message=f"Must be one of {', '.join(BOX_SIZE_TYPES)}",
                value=box_size_type
            ))

        # Default sizing derives the box size from price, the parameter is unused
        if "box_size" in params:
            value = params["box_size"]
            if not _is_number(value):
                errors.append(ValidationError(
                    field="box_size",
                    message="Must be a number",
                    value=value
                ))
            elif value < 0:
                errors.append(ValidationError(
                    field="box_size",
                    message="Must not be negative",
                    value=value
                ))
            elif box_size_type != "default" and value == 0:
                errors.append(ValidationError(
                    field="box_size",
                    message="Must be a positive number",
                    value=value
                ))

        if "reversal_count" in params:
            value = params["reversal_count"]
            if not _is_int(value) or value < 1:
                errors.append(ValidationError(
                    field="reversal_count",
                    message="Must be a positive integer",
                    value=value
                ))

        if "track_trend_lines" in params:
            value = params["track_trend_lines"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="track_trend_lines",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_indicator_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate indicator parameters."""
        errors = []

        for name in ("sma_short_period", "sma_long_period", "bands_period",
                     "significant_touches"):
            if name in params:
                value = params[name]
                if not _is_int(value) or value <= 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a positive integer",
                        value=value
                    ))

        if "bands_std_devs" in params:
            value = params["bands_std_devs"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="bands_std_devs",
                    message="Must be a non-negative number",
                    value=value
                ))

        for name in ("sr_threshold", "sr_tolerance"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value <= 0 or value > 1:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a positive number between 0 and 1",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in LOG_LEVELS:
                errors.append(ValidationError(
                    field="level",
                    message=f"Must be one of {', '.join(LOG_LEVELS)}",
                    value=value
                ))

        for name in ("format_json", "include_timestamp", "include_caller"):
            if name in params and not isinstance(params[name], bool):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a boolean",
                    value=params[name]
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "chart" in config:
            errors.extend(ConfigValidator.validate_chart_params(config["chart"]))

        if "indicators" in config:
            errors.extend(ConfigValidator.validate_indicator_params(config["indicators"]))

        if "logging" in config:
            errors.extend(ConfigValidator.validate_logging_params(config["logging"]))

        return errors
