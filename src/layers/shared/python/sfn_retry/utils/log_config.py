"""structlog configuration for command-line runs.

Lambda handlers keep structlog's defaults; the CLI calls
``configure_logging`` once at startup so log lines go to stderr and
``--verbose`` turns on debug events.
"""

import logging
import sys

import structlog


def configure_logging(verbose: bool = False) -> None:
    """Configure structlog for the process.

    Args:
        verbose: Emit DEBUG events when True, INFO and above otherwise.
    """
    level = logging.DEBUG if verbose else logging.INFO

    processors: list = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
