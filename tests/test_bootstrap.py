"""Tests for configuration and component wiring."""

import json
import logging

import pytest

from conftest import BASE_URL, FakeBackend, envelope, make_product, make_session, order_payload
from storefront_client.bootstrap import create_services
from storefront_client.config import Config
from storefront_client.models import ShippingDetails
from storefront_client.services import CartStore, SessionManager
from storefront_client.storage import MemoryStorage


@pytest.fixture
def config(monkeypatch):
    monkeypatch.setenv("STOREFRONT_API_URL", BASE_URL)
    monkeypatch.setenv("STOREFRONT_STORE", "memory")
    monkeypatch.setenv("SHIPPING_COST", "99")
    return Config()


def test_config_reads_environment(config):
    assert config.api.base_url == BASE_URL
    assert config.storage.store_type == "memory"
    assert config.checkout.shipping_cost == 99.0
    assert config.validate()
    assert config.to_dict()["checkout"]["shipping_cost"] == 99.0


@pytest.mark.parametrize("name, value", [
    ("STOREFRONT_API_URL", "ftp://example.com"),
    ("STOREFRONT_STORE", "sqlite"),
    ("SHIPPING_COST", "-1"),
])
def test_invalid_config_is_rejected(monkeypatch, config, name, value):
    monkeypatch.setenv(name, value)
    invalid = Config()

    assert not invalid.validate()
    with pytest.raises(ValueError):
        create_services(invalid, storage=MemoryStorage())


def test_restart_restores_session_and_cart(config):
    storage = MemoryStorage()
    SessionManager(storage).set(make_session())
    CartStore(storage).add_item(make_product(1, "Tea", 100.0), 2)

    services = create_services(config, storage=storage)

    assert services.session_manager.is_authenticated
    assert services.session_manager.user.email == "ada@example.com"
    assert services.cart.item_count == 2
    assert services.checkout.quote().grand_total == 299.0


def test_partial_session_is_discarded_on_start(config):
    storage = MemoryStorage({"accessToken": "a", "cart": json.dumps([])})

    services = create_services(config, storage=storage)

    assert not services.session_manager.is_authenticated
    assert storage.get("accessToken") is None


@pytest.mark.asyncio
async def test_wired_checkout_flow(config):
    backend = FakeBackend()
    backend.respond("POST", "/orders", body=envelope(order_payload(42)))
    storage = MemoryStorage()
    SessionManager(storage).set(make_session())

    services = create_services(config, storage=storage, transport=backend.transport)
    services.cart.add_item(make_product(1), 1)

    success, _, order = await services.checkout.place_order(ShippingDetails("12 Main St", "555-0100"))

    assert success
    assert order.id == 42
    assert services.navigator.current_path == "/orders/42"
    assert json.loads(storage.get("cart")) == []


def test_configure_logging_writes_log_file(monkeypatch, tmp_path, config):
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    config.logging.file = str(tmp_path / "logs" / "client.log")
    try:
        config.configure_logging()
        logging.getLogger("storefront_client.test").info("hello from the client")
        for handler in root.handlers:
            handler.flush()
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

    assert "hello from the client" in (tmp_path / "logs" / "client.log").read_text()
