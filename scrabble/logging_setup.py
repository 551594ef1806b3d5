"""
logging_setup.py - Console and rotating-file logging for the CLI.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Marks handlers installed here so repeated setup calls replace them
_HANDLER_TAG = '_scrabble_handler'


def setup_logging(
    level: str = 'INFO',
    log_dir: Optional[str] = 'logs',
    log_file: str = 'scrabble.log',
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
) -> logging.Logger:
    """Configure structured logging with rotation. log_dir=None logs to console only."""
    formatter = logging.Formatter(LOG_FORMAT)
    handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, log_file),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8',
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    # Root logger
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            logger.removeHandler(handler)
            handler.close()

    for handler in handlers:
        setattr(handler, _HANDLER_TAG, True)
        logger.addHandler(handler)

    return logger
