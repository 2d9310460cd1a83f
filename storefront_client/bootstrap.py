"""Wiring of the client components

Components are built once here and handed to each other explicitly.
"""

from dataclasses import dataclass
from typing import Optional

import httpx

from .backend_client import StorefrontBackendClient
from .config import Config, get_config
from .gateway import HttpGateway
from .services.auth_service import AuthService
from .services.cart_store import CartStore
from .services.checkout_service import CheckoutOrchestrator
from .services.navigation import Navigator
from .services.order_lifecycle import OrderLifecycle
from .services.session_manager import SessionManager
from .storage import KeyValueStorage, create_storage
from .utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class StorefrontServices:
    config: Config
    storage: KeyValueStorage
    navigator: Navigator
    session_manager: SessionManager
    gateway: HttpGateway
    backend: StorefrontBackendClient
    auth: AuthService
    cart: CartStore
    checkout: CheckoutOrchestrator
    orders: OrderLifecycle


def create_services(
    config: Optional[Config] = None,
    storage: Optional[KeyValueStorage] = None,
    navigator: Optional[Navigator] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> StorefrontServices:
    """
    Build every component and restore persisted state

    Args:
        config: Configuration (defaults to the environment-driven one)
        storage: Persisted key-value storage (defaults to config.storage)
        navigator: Navigation capability of the host UI
        transport: Optional httpx transport for the gateway

    Returns:
        The wired services
    """
    config = config or get_config()
    if not config.validate():
        raise ValueError("Invalid storefront client configuration")

    storage = storage if storage is not None else create_storage(config.storage)
    navigator = navigator or Navigator()

    session_manager = SessionManager(storage)
    session_manager.load()

    gateway = HttpGateway(session_manager, navigator, config.api, transport=transport)
    backend = StorefrontBackendClient(gateway)
    cart = CartStore(storage)

    services = StorefrontServices(
        config=config,
        storage=storage,
        navigator=navigator,
        session_manager=session_manager,
        gateway=gateway,
        backend=backend,
        auth=AuthService(backend, session_manager, navigator),
        cart=cart,
        checkout=CheckoutOrchestrator(backend, session_manager, cart, navigator, config.checkout),
        orders=OrderLifecycle(backend)
    )
    logger.info(f"Storefront services ready (store={config.storage.store_type}, "
                f"authenticated={session_manager.is_authenticated}, cart_items={cart.item_count})")
    return services


_services: Optional[StorefrontServices] = None


def get_services() -> StorefrontServices:
    """Get singleton services built from the environment configuration"""
    global _services
    if _services is None:
        config = get_config()
        config.configure_logging()
        _services = create_services(config)
    return _services
