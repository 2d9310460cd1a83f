"""Logging utilities for the storefront client"""

import logging
import os
import sys
from typing import Optional


DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get a configured logger instance

    Args:
        name: Logger name (usually __name__)
        level: Optional log level override

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if level:
        log_level = getattr(logging, level.upper(), logging.INFO)
        logger.setLevel(log_level)

    return logger


def setup_logging(debug: bool = False, log_file: Optional[str] = None,
                  fmt: str = DEFAULT_FORMAT) -> logging.Logger:
    """
    Setup logging for applications embedding the client

    All records go to stderr so that stdout stays free for the host
    application's own output.

    Args:
        debug: Enable debug logging
        log_file: Optional path of an additional log file
        fmt: Log record format
    """
    log_level_str = os.getenv('LOG_LEVEL', 'INFO').upper()
    log_level_map = {
        'DEBUG': logging.DEBUG,
        'INFO': logging.INFO,
        'WARNING': logging.WARNING,
        'ERROR': logging.ERROR,
        'CRITICAL': logging.CRITICAL
    }
    log_level = log_level_map.get(log_level_str, logging.INFO)

    if debug:
        log_level = logging.DEBUG

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    formatter = logging.Formatter(fmt, datefmt='%Y-%m-%d %H:%M:%S')

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(log_level)
    stderr_handler.setFormatter(formatter)
    root_logger.addHandler(stderr_handler)

    if log_file:
        try:
            log_dir = os.path.dirname(log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except (OSError, PermissionError) as e:
            # Console logging still works without the file
            root_logger.warning(f"Could not create log file {log_file}: {e}")

    # Suppress noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return root_logger


def mask_token(value: Optional[str], visible: int = 6) -> str:
    """Shorten a credential so it can be written to logs"""
    if not value:
        return "<none>"
    if len(value) <= visible:
        return "***"
    return f"{value[:visible]}..."


def mask_headers(headers: dict) -> dict:
    """Copy of request headers with the bearer credential masked"""
    masked = dict(headers)
    auth = masked.get("Authorization")
    if auth and auth.startswith("Bearer "):
        masked["Authorization"] = f"Bearer {mask_token(auth[len('Bearer '):])}"
    return masked
