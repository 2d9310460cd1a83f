"""Tests for checkout orchestration."""

import httpx
import pytest

from conftest import body_of, envelope, make_product, order_payload
from storefront_client.config import CheckoutConfig
from storefront_client.models import ShippingDetails
from storefront_client.models.order import OrderStatus
from storefront_client.services.checkout_service import (
    CheckoutOrchestrator,
    ORDER_FAILED_MESSAGE,
    REQUIRED_FIELDS_MESSAGE,
)


@pytest.fixture
def checkout(backend_client, session_manager, cart, navigator, checkout_config):
    return CheckoutOrchestrator(backend_client, session_manager, cart, navigator, checkout_config)


@pytest.fixture
def filled_cart(cart):
    cart.add_item(make_product(1, "Tea", 100.0), 2)
    cart.add_item(make_product(2, "Mug", 50.0), 1)
    return cart


SHIPPING = ShippingDetails(address="12 Main St", phone="555-0100")


class TestCheckoutAccess:

    @pytest.mark.asyncio
    async def test_no_session_redirects_to_login(self, checkout, filled_cart, navigator, fake_backend):
        success, message, order = await checkout.place_order(SHIPPING)

        assert not success
        assert order is None
        assert navigator.current_path == "/login"
        assert fake_backend.calls == []
        assert filled_cart.item_count == 3

    @pytest.mark.asyncio
    async def test_empty_cart_redirects_to_cart(self, checkout, logged_in, navigator, fake_backend):
        success, _, _ = await checkout.place_order(SHIPPING)

        assert not success
        assert navigator.current_path == "/cart"
        assert fake_backend.calls == []

    def test_check_access_passes_with_session_and_items(self, checkout, logged_in, filled_cart, navigator):
        assert checkout.check_access()
        assert navigator.history == ["/"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("address, phone", [("", "555"), ("12 Main St", "  "), ("   ", "")])
    async def test_blank_fields_are_rejected_locally(self, checkout, logged_in, filled_cart,
                                                     fake_backend, address, phone):
        success, message, order = await checkout.place_order(ShippingDetails(address=address, phone=phone))

        assert not success
        assert message == REQUIRED_FIELDS_MESSAGE
        assert order is None
        assert fake_backend.calls == []
        assert filled_cart.item_count == 3


class TestPlaceOrder:

    @pytest.mark.asyncio
    async def test_success_clears_cart_and_navigates(self, checkout, logged_in, filled_cart,
                                                     navigator, fake_backend):
        fake_backend.respond("POST", "/orders", body=envelope(order_payload(42), "Order created"))

        success, message, order = await checkout.place_order(SHIPPING)

        assert success
        assert message == "Order placed successfully"
        assert order.id == 42
        assert order.status == OrderStatus.PENDING
        assert filled_cart.is_empty()
        assert navigator.current_path == "/orders/42"

        (request,) = fake_backend.calls_to("POST", "/orders")
        assert body_of(request) == {
            "items": [{"productId": 1, "quantity": 2}, {"productId": 2, "quantity": 1}],
            "shippingAddress": "12 Main St",
        }

    @pytest.mark.asyncio
    async def test_backend_rejection_keeps_cart(self, checkout, logged_in, filled_cart,
                                                navigator, fake_backend):
        fake_backend.respond("POST", "/orders", status=400,
                             body={"success": False, "message": "Insufficient stock for Tea"})

        success, message, order = await checkout.place_order(SHIPPING)

        assert not success
        assert message == "Insufficient stock for Tea"
        assert order is None
        assert [(i.product_id, i.quantity) for i in filled_cart.items] == [(1, 2), (2, 1)]
        assert navigator.current_path == "/"

    @pytest.mark.asyncio
    async def test_network_failure_uses_generic_message(self, checkout, logged_in, filled_cart, fake_backend):
        def unreachable(request):
            raise httpx.ConnectError("connection refused", request=request)

        fake_backend.route("POST", "/orders", unreachable)

        success, message, _ = await checkout.place_order(SHIPPING)

        assert not success
        assert message == ORDER_FAILED_MESSAGE
        assert filled_cart.item_count == 3

    @pytest.mark.asyncio
    async def test_failure_without_message_uses_generic_message(self, checkout, logged_in, filled_cart,
                                                                fake_backend):
        fake_backend.respond("POST", "/orders", status=500, body={"success": False})

        success, message, _ = await checkout.place_order(SHIPPING)

        assert not success
        assert message == ORDER_FAILED_MESSAGE
        assert filled_cart.item_count == 3

    @pytest.mark.asyncio
    async def test_malformed_order_response_keeps_cart(self, checkout, logged_in, filled_cart, fake_backend):
        fake_backend.respond("POST", "/orders", body=envelope({"status": "PENDING"}))

        success, message, _ = await checkout.place_order(SHIPPING)

        assert not success
        assert message == ORDER_FAILED_MESSAGE
        assert filled_cart.item_count == 3

    @pytest.mark.asyncio
    async def test_order_survives_token_refresh(self, checkout, logged_in, filled_cart, fake_backend):
        def orders(request):
            if request.headers.get("Authorization") == "Bearer access-2":
                return 200, envelope(order_payload(7))
            return 401, {"success": False}

        fake_backend.route("POST", "/orders", orders)
        fake_backend.respond("POST", "/auth/refresh",
                             body=envelope({"accessToken": "access-2", "refreshToken": "refresh-2"}))

        success, _, order = await checkout.place_order(SHIPPING)

        assert success
        assert order.id == 7
        assert len(fake_backend.calls_to("POST", "/orders")) == 2
        assert filled_cart.is_empty()

    @pytest.mark.asyncio
    async def test_guard_is_released_after_failure(self, checkout, logged_in, filled_cart, fake_backend):
        fake_backend.respond("POST", "/orders", status=500, body={"success": False})
        await checkout.place_order(SHIPPING)

        assert not checkout.is_placing_order


def test_quote_adds_shipping(checkout, filled_cart):
    quote = checkout.quote()

    assert quote.subtotal == 250.0
    assert quote.shipping_cost == 250.0
    assert quote.grand_total == 500.0
    assert quote.item_count == 3


def test_build_order_request_trims_address(checkout, filled_cart):
    request = checkout.build_order_request(ShippingDetails(address="  12 Main St ", phone="1"))

    assert request.shipping_address == "12 Main St"
    assert [line.to_dict() for line in request.items] == [
        {"productId": 1, "quantity": 2},
        {"productId": 2, "quantity": 1},
    ]


@pytest.mark.asyncio
async def test_items_added_while_order_is_in_flight_stay_in_cart(checkout, logged_in, filled_cart,
                                                                fake_backend):
    def create_order(request):
        filled_cart.add_item(make_product(3, "Pot", 20.0), 1)
        filled_cart.add_item(make_product(1, "Tea", 100.0), 1)
        return 200, envelope(order_payload(42))

    fake_backend.route("POST", "/orders", create_order)

    success, _, _ = await checkout.place_order(SHIPPING)

    assert success
    assert [(i.product_id, i.quantity) for i in filled_cart.items] == [(1, 1), (3, 1)]


def test_quote_display_uses_currency_label(backend_client, session_manager, cart, navigator):
    cart.add_item(make_product(1, "Tea", 100.0), 2)
    checkout = CheckoutOrchestrator(backend_client, session_manager, cart, navigator,
                                    CheckoutConfig(shipping_cost=250.0, currency_label="EUR"))

    assert checkout.quote().to_dict() == {
        "item_count": 2,
        "subtotal": "EUR 200.00",
        "shipping": "EUR 250.00",
        "total": "EUR 450.00",
    }
