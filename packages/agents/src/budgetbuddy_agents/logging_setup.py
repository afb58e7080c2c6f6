"""structlog setup for BudgetBuddy processes.

Library modules only call ``structlog.get_logger()``. Applications call
``configure_logging`` once at startup to pick the level and renderer.
"""

import logging

import structlog

from budgetbuddy_core.exceptions import ConfigurationError


def configure_logging(level: str = "INFO", *, json_output: bool = False) -> None:
    """Configure structlog for the process.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_output: Render JSON lines instead of the console format.

    Raises:
        ConfigurationError: If the level name is not recognized.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ConfigurationError(
            f"Invalid log level: {level}",
            config_key="BUDGETBUDDY_LOG_LEVEL",
            expected="DEBUG, INFO, WARNING, ERROR or CRITICAL",
            actual=level,
        )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=False,
    )
