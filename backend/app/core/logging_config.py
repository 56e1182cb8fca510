"""
Logging Setup

Configures the root logger once at application startup.
Modules log through logging.getLogger(__name__).
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-40s | %(message)s"
DATE_FORMAT = "%H:%M:%S"

# Third-party loggers that are noisy at INFO
QUIET_LOGGERS = ("yfinance", "urllib3", "peewee", "aiohttp.access")


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the backend."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
