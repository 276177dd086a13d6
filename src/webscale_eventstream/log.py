"""
Logging setup for the event stream.

Records carry their structured context in `record.context`; the formatter
appends it as JSON, the way a monolog line does.
"""

import json
import logging
import os
from typing import Optional

LOGGER_NAME = "webscale_eventstream"
DEFAULT_LOG_FILE = "/var/log/webscale_eventstream.log"
LOG_FORMAT = "[%(asctime)s] %(name)s.%(levelname)s: %(message)s"

logger = logging.getLogger(LOGGER_NAME)


class ContextFormatter(logging.Formatter):
    def __init__(self, fmt: str = LOG_FORMAT, datefmt: Optional[str] = None):
        super().__init__(fmt, datefmt)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = getattr(record, "context", None)
        if context:
            line += " " + json.dumps(context, default=str)
        return line


def configure_file_logging(path: str = DEFAULT_LOG_FILE, level: int = logging.INFO) -> logging.Handler:
    """Attach a file handler for the event stream log. Reuses an existing one for the same path."""
    target = os.path.abspath(path)
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == target:
            return handler

    handler = logging.FileHandler(target)
    handler.setLevel(level)
    handler.setFormatter(ContextFormatter())
    logger.addHandler(handler)
    if logger.level == logging.NOTSET or logger.level > level:
        logger.setLevel(level)
    return handler
