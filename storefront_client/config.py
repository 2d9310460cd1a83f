"""Configuration management for the storefront client"""

import os
import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any
from dotenv import load_dotenv

from .utils.logger import setup_logging, DEFAULT_FORMAT

# Load environment variables
load_dotenv()


@dataclass
class APIConfig:
    """API configuration"""
    base_url: str
    timeout: float = 30.0
    max_connections: int = 10
    max_keepalive_connections: int = 5
    debug_curl: bool = False


@dataclass
class StorageConfig:
    """Local persistence configuration"""
    store_type: str = "file"  # memory, file, redis
    store_path: str = "./storefront_state.json"
    key_prefix: str = "storefront:"
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0


@dataclass
class CheckoutConfig:
    """Checkout configuration"""
    shipping_cost: float = 250.0
    currency_label: str = "Rs."


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "INFO"
    file: Optional[str] = None
    format: str = DEFAULT_FORMAT


class Config:
    """Main configuration class"""

    def __init__(self):
        self.api = APIConfig(
            base_url=os.getenv("STOREFRONT_API_URL", "http://localhost:8080/api"),
            timeout=float(os.getenv("API_TIMEOUT", "30")),
            max_connections=int(os.getenv("API_MAX_CONNECTIONS", "10")),
            max_keepalive_connections=int(os.getenv("API_MAX_KEEPALIVE", "5")),
            debug_curl=os.getenv("DEBUG_CURL_LOGGING", "false").lower() == "true"
        )

        self.storage = StorageConfig(
            store_type=os.getenv("STOREFRONT_STORE", "file"),
            store_path=os.path.expanduser(os.getenv("STOREFRONT_STORE_PATH", "~/.storefront/state.json")),
            key_prefix=os.getenv("STOREFRONT_KEY_PREFIX", "storefront:"),
            redis_host=os.getenv("REDIS_HOST", "localhost"),
            redis_port=int(os.getenv("REDIS_PORT", "6379")),
            redis_db=int(os.getenv("REDIS_DB", "0"))
        )

        self.checkout = CheckoutConfig(
            shipping_cost=float(os.getenv("SHIPPING_COST", "250")),
            currency_label=os.getenv("CURRENCY_LABEL", "Rs.")
        )

        self.logging = LoggingConfig(
            level=os.getenv("LOG_LEVEL", "INFO"),
            file=os.getenv("LOG_FILE")
        )

    def configure_logging(self):
        """Configure logging based on settings"""
        setup_logging(
            debug=self.logging.level.upper() == "DEBUG",
            log_file=self.logging.file,
            fmt=self.logging.format
        )

    def validate(self) -> bool:
        """Validate configuration"""
        errors = []

        if not self.api.base_url:
            errors.append("STOREFRONT_API_URL is required")
        elif not self.api.base_url.startswith(("http://", "https://")):
            errors.append("STOREFRONT_API_URL must be an http(s) URL")
        if self.api.timeout <= 0:
            errors.append("API_TIMEOUT must be positive")
        if self.storage.store_type not in ("memory", "file", "redis"):
            errors.append(f"Unknown STOREFRONT_STORE: {self.storage.store_type}")
        if self.checkout.shipping_cost < 0:
            errors.append("SHIPPING_COST cannot be negative")

        if errors:
            for error in errors:
                logging.error(f"Configuration error: {error}")
            return False

        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        return {
            "api": {
                "base_url": self.api.base_url,
                "timeout": self.api.timeout,
                "max_connections": self.api.max_connections,
                "debug_curl": self.api.debug_curl
            },
            "storage": {
                "store_type": self.storage.store_type,
                "store_path": self.storage.store_path,
                "key_prefix": self.storage.key_prefix
            },
            "checkout": {
                "shipping_cost": self.checkout.shipping_cost,
                "currency_label": self.checkout.currency_label
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file
            }
        }


_config: Optional[Config] = None


def get_config() -> Config:
    """Get singleton Config instance"""
    global _config
    if _config is None:
        _config = Config()
    return _config
