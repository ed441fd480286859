"""Logging setup: JSON lines for collection, plain text for a console."""

import logging
import sys
from pythonjsonlogger import jsonlogger


TEXT_FORMAT = '%(asctime)s %(levelname)-8s %(name)s: %(message)s'


def setup_logger(name: str = "netpulse", level: str = "INFO", json_format: bool = True) -> logging.Logger:
    """
    Configure the application logger.

    Child loggers created with `getChild` share this handler.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Emit JSON objects (default) or human-readable lines

    Returns:
        logging.Logger: Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Reconfiguring replaces handlers instead of stacking them
    logger.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    if json_format:
        formatter = jsonlogger.JsonFormatter(
            '%(asctime)s %(name)s %(levelname)s %(message)s',
            rename_fields={"levelname": "level"},
            timestamp=True
        )
    else:
        formatter = logging.Formatter(TEXT_FORMAT)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    logger.propagate = False

    return logger
