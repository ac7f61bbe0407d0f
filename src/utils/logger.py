"""Logging configuration."""

import logging
import sys

from pythonjsonlogger import jsonlogger
from src.config import settings

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
JSON_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def setup_logger(name: str = __name__) -> logging.Logger:
    """Set up a logger writing to stderr, as JSON lines unless LOG_FORMAT=text.

    Stdout is left to command output (``python -m src.main weather ...``).
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)

        if settings.log_format == "json":
            formatter = jsonlogger.JsonFormatter(
                JSON_FORMAT, rename_fields={"levelname": "level"}
            )
        else:
            formatter = logging.Formatter(TEXT_FORMAT)

        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False

    return logger
