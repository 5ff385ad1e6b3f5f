"""
Centralized logging configuration for the PnF charting system.

This module provides standardized logging configuration using structlog
for all components. All logging throughout the system should use this
configuration to ensure consistent formatting and structured logging.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                       structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_chart_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for chart construction events.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for column formation
    """
    logger = get_logger(name)

    return logger.bind(
        subsystem="chart",
        audit_trail=True
    )


def get_trendline_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for trend line events.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for trend line management
    """
    logger = get_logger(name)

    return logger.bind(
        subsystem="trendlines",
        audit_trail=True
    )


def log_column_event(
    logger: FilteringBoundLogger,
    column_index: int,
    column_type: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a column formation event with standardized format.

    Args:
        logger: Structlog logger instance
        column_index: Index of the column that was created
        column_type: Type of the new column (X, O, Mixed)
        trigger: What created the column ("first_observation", "reversal")
        context: Additional context data
    """
    bound_logger = logger.bind(
        column_index=column_index,
        column_type=column_type,
        trigger=trigger,
        event_type="column_started"
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("Column started")


def log_trendline_event(
    logger: FilteringBoundLogger,
    action: str,
    line_type: str,
    column_index: int,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a trend line lifecycle event with standardized format.

    Args:
        logger: Structlog logger instance
        action: "formed", "broken" or "touched"
        line_type: Trend line kind
        column_index: Column that caused the event
        context: Additional context data
    """
    bound_logger = logger.bind(
        action=action,
        line_type=line_type,
        column_index=column_index,
        event_type="trendline_event"
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if action == "touched":
        bound_logger.debug("Trend line event")
    else:
        bound_logger.info("Trend line event")
