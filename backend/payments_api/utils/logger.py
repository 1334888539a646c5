"""
Logging Setup — Console + log file output for the payments API.
"""
import logging
import os
import sys

from payments_api.config import Settings

LOGGER_NAME = "payments_api"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s: %(message)s"


def configure_logging(settings: Settings) -> logging.Logger:
    """Attach console and file handlers to the package logger (idempotent)."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    logger.addHandler(console)

    os.makedirs(settings.LOG_DIR, exist_ok=True)
    file_handler = logging.FileHandler(os.path.join(settings.LOG_DIR, "server.log"), encoding="utf-8")
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    return logger
