"""Logging configuration for the image sync command."""
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter for structured logging."""

    def add_fields(self, log_record, record, message_dict):
        super(CustomJsonFormatter, self).add_fields(log_record, record, message_dict)
        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['module'] = record.module
        log_record['function'] = record.funcName
        log_record['line'] = record.lineno


def setup_logging(debug: bool = False, json_format: bool = False,
                  log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger for a batch run.

    Console output goes to stderr, either in the plain text format or as one
    JSON object per line. When ``log_file`` is given the same records are also
    written to a rotating file in the plain text format.
    """
    root = logging.getLogger()
    level = logging.DEBUG if debug else logging.INFO

    # Remove default handlers
    for handler in list(root.handlers):
        root.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    if json_format:
        console_handler.setFormatter(CustomJsonFormatter())
    else:
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10485760,  # 10MB
            backupCount=10
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(file_handler)

    root.setLevel(level)

    # urllib3 logs every connection at DEBUG
    logging.getLogger('urllib3').setLevel(logging.INFO if debug else logging.WARNING)
    return root
