"""Utility modules for the storefront client"""

from .logger import get_logger, setup_logging, mask_token, mask_headers

__all__ = [
    "get_logger",
    "setup_logging",
    "mask_token",
    "mask_headers"
]
