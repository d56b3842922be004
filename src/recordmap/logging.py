"""
Structured logging configuration for recordmap.

Conversion events are logged with field names and keys only. Field values
may hold personal or otherwise sensitive row data, so a processor strips
them from every event before rendering.
"""

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, cast

import structlog
from structlog.types import FilteringBoundLogger

if TYPE_CHECKING:
    from .config import Settings

REDACTED = "[REDACTED]"


class ValueRedactingProcessor:
    """
    Structlog processor that keeps record field values out of log output.

    Note: This class has only one public method (__call__) as it's designed
    to be used as a single-purpose structlog processor.
    """

    VALUE_KEYS = {
        "value",
        "values",
        "record",
        "mapping",
        "row",
    }

    def __call__(
        self, logger: Any, method_name: str, event_dict: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Replace value-bearing entries of an event with a placeholder.

        Args:
            logger: Structlog logger instance
            method_name: Log method name (info, error, etc.)
            event_dict: Event dictionary to process

        Returns:
            Event dictionary with values redacted
        """
        return {
            key: REDACTED if key in self.VALUE_KEYS else value
            for key, value in event_dict.items()
        }


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "console",
    log_file: Optional[str] = None,
    redact_values: bool = True,
) -> None:
    """
    Set up structured logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format (json, console)
        log_file: Optional log file path
        redact_values: Whether to strip field values from log events
    """
    level = getattr(logging, log_level.upper())

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if redact_values:
        processors.append(ValueRedactingProcessor())

    if log_format == "json":
        processors.extend(
            [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
        )
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,  # type: ignore[arg-type]
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    for handler in handlers:
        handler.setLevel(level)

    logging.basicConfig(level=level, handlers=handlers, format="%(message)s", force=True)


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a structured logger.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return cast(FilteringBoundLogger, structlog.get_logger(name))


def setup_logging_from_settings(settings: "Settings") -> None:
    """
    Configure logging from the ``logging`` section of converter settings.

    Args:
        settings: Settings whose ``logging`` section (level, format,
            redact_values) drives the configuration
    """
    setup_logging(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        redact_values=settings.logging.redact_values,
    )
