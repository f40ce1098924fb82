"""
Logging setup for the portfolio API.

The level comes from settings; DEBUG forces debug output and adds line
numbers to each record. HTTP client libraries stay at WARNING because
the market data adapters log their own upstream calls.
"""

import logging
import sys

from portfolio_tracker.config import Settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s:%(lineno)d | %(message)s"

QUIET_LOGGERS = ("httpx", "httpcore")


def resolve_level(settings: Settings) -> int:
    return getattr(logging, settings.effective_log_level, logging.INFO)


def configure_logging(settings: Settings) -> None:
    """
    Configure root logging to stdout from application settings.
    """
    logging.basicConfig(
        level=resolve_level(settings),
        format=DEBUG_LOG_FORMAT if settings.DEBUG else LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
