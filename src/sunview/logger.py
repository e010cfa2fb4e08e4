"""Logging configuration module for SunView."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from sunview.config import LoggingConfig

APP_LOGGER = "sunview"

# Libraries that are chatty below WARNING: Pillow logs every plugin import at
# DEBUG and APScheduler logs each job run at INFO.
NOISY_LOGGERS = ("PIL", "apscheduler")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(config: Optional[LoggingConfig] = None) -> logging.Logger:
    """Configure the application logger from settings.

    Module loggers obtained with :func:`get_logger` are children of the
    application logger and inherit its handlers.

    Args:
        config: Logging configuration. If None, uses defaults.

    Returns:
        The configured application logger.
    """
    if config is None:
        config = LoggingConfig()

    level = getattr(logging, config.level)
    logger = logging.getLogger(APP_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if config.file:
        try:
            log_path = Path(config.file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = RotatingFileHandler(
                log_path,
                maxBytes=config.max_size_mb * 1024 * 1024,
                backupCount=config.backup_count,
                encoding="utf-8",
            )
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning(f"Cannot log to {config.file} ({e}), logging to console only")

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return logger


def get_logger(name: str = APP_LOGGER) -> logging.Logger:
    """Get a logger under the application namespace.

    The application logger gets a basic console handler the first time it is
    needed, so library use without :func:`setup_logger` still logs.

    Args:
        name: Logger name, usually the calling module's ``__name__``.

    Returns:
        Logger instance.
    """
    app_logger = logging.getLogger(APP_LOGGER)
    if not app_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        app_logger.addHandler(handler)
        app_logger.setLevel(logging.INFO)
    return logging.getLogger(name)
