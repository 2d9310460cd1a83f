"""Storefront client: session, cart and checkout layer for the storefront REST backend"""

__version__ = "0.1.0"

from .bootstrap import StorefrontServices, create_services, get_services

__all__ = [
    "StorefrontServices",
    "create_services",
    "get_services",
    "__version__"
]
