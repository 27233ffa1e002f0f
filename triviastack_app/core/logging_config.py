"""File logging for TriviaStack.

Console output is set up by ``core.bootstrap.configure_logging``; this module
only adds the rotating log file, in plain text or one JSON object per line.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

TEXT_FORMAT = '%(asctime)s [%(levelname)s] %(name)s.%(module)s: %(message)s'
JSON_FORMAT = ('{"time": "%(asctime)s", "level": "%(levelname)s", '
               '"logger": "%(name)s", "message": "%(message)s"}')
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

LOG_FILE_NAME = 'triviastack.log'
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def build_formatter(json_format: bool = False) -> logging.Formatter:
    return logging.Formatter(JSON_FORMAT if json_format else TEXT_FORMAT, datefmt=DATE_FORMAT)


def setup_logging(
    logger: logging.Logger,
    log_level: str = 'INFO',
    log_dir: Optional[str] = None,
    json_format: bool = False,
) -> logging.Logger:
    """Gắn RotatingFileHandler vào ``logger`` (thường là ``app.logger``)."""
    target_dir = log_dir or os.path.join(os.getcwd(), 'logs')
    os.makedirs(target_dir, exist_ok=True)

    handler = RotatingFileHandler(
        os.path.join(target_dir, LOG_FILE_NAME),
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding='utf-8',
    )
    handler.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    handler.setFormatter(build_formatter(json_format))
    logger.addHandler(handler)

    logger.info("Writing logs to %s (level=%s, json=%s)", target_dir, log_level, json_format)
    return logger
