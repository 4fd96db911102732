"""Logging setup for the CLI: one stderr handler on the root logger"""

import logging
import sys


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def setup_logging(log_level: str = "WARNING") -> None:
    """Configure the root logger at log_level, replacing any existing handlers."""
    numeric_level = getattr(logging, log_level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)

    logging.getLogger(__name__).debug("Logging configured: level=%s", log_level)
