"""
API Initialization - Logging Module.

Configures loguru logger with stderr and rotating file sinks.
"""

import sys

from loguru import logger

from helpnet.config.settings import settings


def setup_logging(log_path: str = "logs/indexer.log") -> None:
    """Configure logger with file rotation."""
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)
    logger.add(
        log_path,
        rotation="1 day",
        retention="7 days",
        level=settings.log_level,
        encoding="utf-8",
    )

    logger.info("Starting HelpNet indexer...")
