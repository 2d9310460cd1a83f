"""
Shared test fixtures and helpers for the storefront client test suite.
"""

import asyncio
import json
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest

from storefront_client.backend_client import StorefrontBackendClient
from storefront_client.config import APIConfig, CheckoutConfig
from storefront_client.gateway import HttpGateway
from storefront_client.models import Product, Session, UserProfile, Role
from storefront_client.services import CartStore, Navigator, SessionManager
from storefront_client.storage import MemoryStorage

BASE_URL = "http://testserver/api"


# ============================================================================
# Fake backend
# ============================================================================


def envelope(data: Any = None, message: str = "", success: bool = True) -> Dict[str, Any]:
    return {"success": success, "message": message, "data": data}


class FakeBackend:
    """Routes requests to per-endpoint handlers and records every call.

    Handlers receive the httpx.Request and return (status, body) or an
    httpx.Response. They may be coroutines.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Callable] = {}
        self.calls: List[httpx.Request] = []

    def route(self, method: str, path: str, handler: Callable) -> None:
        self.routes[(method.upper(), path)] = handler

    def respond(self, method: str, path: str, status: int = 200, body: Any = None) -> None:
        self.route(method, path, lambda request: (status, body))

    def calls_to(self, method: str, path: str) -> List[httpx.Request]:
        return [c for c in self.calls if c.method == method.upper() and c.url.path == f"/api{path}"]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        path = request.url.path[len("/api"):]
        handler = self.routes.get((request.method, path))
        if handler is None:
            return httpx.Response(404, json={"success": False, "message": f"No route {path}"})
        result = handler(request)
        if asyncio.iscoroutine(result):
            result = await result
        if isinstance(result, httpx.Response):
            return result
        status, body = result
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def bearer(request: httpx.Request) -> Optional[str]:
    auth = request.headers.get("Authorization")
    if auth and auth.startswith("Bearer "):
        return auth[len("Bearer "):]
    return None


def body_of(request: httpx.Request) -> Any:
    return json.loads(request.content) if request.content else None


# ============================================================================
# Domain factories
# ============================================================================


def make_product(product_id: int = 1, name: str = "Tea", price: float = 100.0,
                 quantity_available: int = 10) -> Product:
    return Product(id=product_id, name=name, price=price, quantity_available=quantity_available,
                   low_stock_threshold=2)


def make_user(role: Role = Role.CUSTOMER) -> UserProfile:
    return UserProfile(id=7, email="ada@example.com", name="Ada", role=role)


def make_session(access: str = "access-1", refresh: str = "refresh-1",
                 role: Role = Role.CUSTOMER) -> Session:
    return Session(access_token=access, refresh_token=refresh, user=make_user(role))


def order_payload(order_id: int = 42, status: str = "PENDING") -> Dict[str, Any]:
    return {
        "id": order_id,
        "status": status,
        "shippingAddress": "12 Main St",
        "totalAmount": 250.0,
        "createdAt": "2024-05-01T10:00:00Z",
        "items": [
            {"productId": 1, "productName": "Tea", "quantity": 2, "priceAtPurchase": 100.0},
            {"productId": 2, "productName": "Mug", "quantity": 1, "price": 50.0},
        ],
    }


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def navigator():
    return Navigator()


@pytest.fixture
def session_manager(storage):
    return SessionManager(storage)


@pytest.fixture
def logged_in(session_manager):
    session_manager.set(make_session())
    return session_manager


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def gateway(session_manager, navigator, fake_backend):
    return HttpGateway(
        session_manager,
        navigator,
        APIConfig(base_url=BASE_URL),
        transport=fake_backend.transport
    )


@pytest.fixture
def backend_client(gateway):
    return StorefrontBackendClient(gateway)


@pytest.fixture
def cart(storage):
    return CartStore(storage)


@pytest.fixture
def checkout_config():
    return CheckoutConfig(shipping_cost=250.0)
