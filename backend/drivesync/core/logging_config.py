"""
Logging setup for drivesync.

Every module logs through `get_logger(__name__)`; `setup_logging()` is called
once by the application entry point. Level, format and optional log file come
from the LOG_LEVEL, LOG_FORMAT and LOG_FILE environment variables.
"""
import logging
import os
import sys
from pathlib import Path
from typing import Dict, Optional

DEFAULT_LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# 'simple' for interactive use, 'detailed' adds logger location to console lines
DEFAULT_LOG_FORMAT = os.getenv("LOG_FORMAT", "simple").lower()

# File logging is off unless a path is set
DEFAULT_LOG_FILE = os.getenv("LOG_FILE")

FORMATS = {
    "simple": ('%(asctime)s - %(levelname)s - %(name)s - %(message)s', '%H:%M:%S'),
    "detailed": ('%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s', '%Y-%m-%d %H:%M:%S'),
}

# Third-party loggers and the level they are capped at
LIBRARY_LOG_LEVELS: Dict[str, int] = {
    "uvicorn": logging.INFO,
    "uvicorn.access": logging.INFO,
    "uvicorn.error": logging.INFO,
    "urllib3": logging.WARNING,
    "botocore": logging.WARNING,
    "boto3": logging.WARNING,
    "s3transfer": logging.WARNING,
}


def _formatter(name: str) -> logging.Formatter:
    fmt, datefmt = FORMATS.get(name, FORMATS["simple"])
    return logging.Formatter(fmt=fmt, datefmt=datefmt)


def setup_logging(
    log_level: str = DEFAULT_LOG_LEVEL,
    log_file: Optional[str] = DEFAULT_LOG_FILE,
    log_format: str = DEFAULT_LOG_FORMAT
) -> None:
    """
    Configure the root logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path of a log file receiving DEBUG and up, console only when None
        log_format: 'simple' or 'detailed' console format
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(_formatter(log_format))
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(_formatter("detailed"))
        root_logger.addHandler(file_handler)
        # The root level gates what reaches the file handler
        root_logger.setLevel(logging.DEBUG)

    for name, level in LIBRARY_LOG_LEVELS.items():
        logging.getLogger(name).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Get the logger of a module (pass __name__)."""
    return logging.getLogger(name)
