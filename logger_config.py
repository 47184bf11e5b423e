"""
Logging configuration for Vocabdesk.

Sets up application logging with console and file handlers.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional


class UnicodeStreamHandler(logging.StreamHandler):
    """
    Stream handler that always writes UTF-8.

    Words, definitions and translations are multilingual, so console
    output must not fail on non-ASCII text.
    """

    def __init__(self, stream=None):
        super().__init__(stream)
        if hasattr(stream, 'reconfigure'):
            try:
                stream.reconfigure(encoding='utf-8', errors='replace')
            except (AttributeError, ValueError):
                pass

    def emit(self, record):
        """Emit a record as text."""
        try:
            msg = self.format(record)
            self.stream.write(msg + self.terminator)
            self.flush()
        except Exception:
            self.handleError(record)


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file

    Returns:
        Configured logger instance
    """
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger("vocabdesk")
    logger.setLevel(level)
    logger.handlers.clear()

    console_handler = UnicodeStreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    ))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - "
            "%(module)s - %(funcName)s - %(message)s"
        ))
        logger.addHandler(file_handler)

    return logger


# Initialize logger
logger = setup_logging(
    log_level=os.getenv("LOG_LEVEL", "INFO"),
    log_file=os.getenv("LOG_FILE") or None
)
