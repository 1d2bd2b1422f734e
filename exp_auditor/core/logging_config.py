"""
Logging configuration.
"""
import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional, TextIO

from exp_auditor.core.config import settings

# Marks handlers installed here so repeated setup calls do not stack them
_HANDLER_TAG = "_exp_auditor_handler"


def setup_logging(level: Optional[str] = None, stream: Optional[TextIO] = None):
    """
    Configure application logging.

    Args:
        level: Optional level name overriding settings.LOG_LEVEL
        stream: Console stream (default: stdout)
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    # Configure root logger
    logger = logging.getLogger()
    logger.setLevel(log_level)

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            logger.removeHandler(handler)
            handler.close()

    # Console handler
    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setLevel(log_level)
    console_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    console_handler.setFormatter(console_formatter)
    setattr(console_handler, _HANDLER_TAG, True)
    logger.addHandler(console_handler)

    # File handler
    if settings.has_log_file():
        log_path = Path(settings.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5
        )
        file_handler.setLevel(log_level)
        file_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
        )
        file_handler.setFormatter(file_formatter)
        setattr(file_handler, _HANDLER_TAG, True)
        logger.addHandler(file_handler)
