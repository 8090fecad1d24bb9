"""Console logging setup for the analytics package.

Usage:
    from campaign_analytics.logging_config import setup_logging
    setup_logging("DEBUG")
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", name: str = "campaign_analytics") -> logging.Logger:
    """Configure and return the package logger.

    Module loggers (`logging.getLogger(__name__)`) propagate to it, so a single
    console handler covers the whole package. Calling twice does not add a
    second handler.
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not logger.handlers:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(console)

    return logger
