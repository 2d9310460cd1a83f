"""Checkout service turning the cart into a server-confirmed order"""

from dataclasses import dataclass
from typing import Dict, Optional, Any, Tuple

from ..backend_client import StorefrontBackendClient
from ..config import CheckoutConfig
from ..errors import ErrorHandler, StorefrontError, ValidationError
from ..models.order import CreateOrderRequest, Order, OrderLine, ShippingDetails
from ..utils.logger import get_logger
from .cart_store import CartStore
from .navigation import Navigator
from .session_manager import SessionManager

logger = get_logger(__name__)

REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields"
ORDER_FAILED_MESSAGE = "Failed to place order. Please try again."


@dataclass
class CheckoutQuote:
    """Amounts shown before the order is placed"""
    subtotal: float
    shipping_cost: float
    item_count: int
    currency_label: str = "Rs."

    @property
    def grand_total(self) -> float:
        return self.subtotal + self.shipping_cost

    def format_amount(self, amount: float) -> str:
        return f"{self.currency_label} {amount:.2f}"

    def to_dict(self) -> Dict[str, Any]:
        """Quote with display strings for the order summary"""
        return {
            'item_count': self.item_count,
            'subtotal': self.format_amount(self.subtotal),
            'shipping': self.format_amount(self.shipping_cost),
            'total': self.format_amount(self.grand_total)
        }


class CheckoutOrchestrator:
    """Validates checkout preconditions and submits the order

    Ordered units leave the cart only after the backend confirms the order;
    every failure leaves it exactly as it was.
    """

    def __init__(
        self,
        backend_client: StorefrontBackendClient,
        session_manager: SessionManager,
        cart: CartStore,
        navigator: Navigator,
        checkout_config: Optional[CheckoutConfig] = None
    ):
        """
        Initialize checkout orchestrator

        Args:
            backend_client: Client used for the order-creation call
            session_manager: Must hold a session before checkout
            cart: Source of the order lines
            navigator: Receives redirects to login, cart and the new order
            checkout_config: Shipping cost settings
        """
        self.backend = backend_client
        self.session_manager = session_manager
        self.cart = cart
        self.navigator = navigator
        self.checkout_config = checkout_config or CheckoutConfig()
        self._placing_order = False

    @property
    def is_placing_order(self) -> bool:
        return self._placing_order

    def quote(self) -> CheckoutQuote:
        return CheckoutQuote(
            subtotal=self.cart.total,
            shipping_cost=self.checkout_config.shipping_cost,
            item_count=self.cart.item_count,
            currency_label=self.checkout_config.currency_label
        )

    def check_access(self) -> bool:
        """
        Redirect away from checkout when it cannot proceed

        Returns:
            True if a session exists and the cart has items
        """
        if not self.session_manager.is_authenticated:
            logger.info("[Checkout] No session, redirecting to login")
            self.navigator.redirect("/login")
            return False
        if self.cart.is_empty():
            logger.info("[Checkout] Cart is empty, redirecting to cart")
            self.navigator.redirect("/cart")
            return False
        return True

    def build_order_request(self, shipping: ShippingDetails) -> CreateOrderRequest:
        lines = [OrderLine(product_id=item.product_id, quantity=item.quantity) for item in self.cart.items]
        return CreateOrderRequest(items=lines, shipping_address=shipping.address.strip())

    async def place_order(self, shipping: ShippingDetails) -> Tuple[bool, str, Optional[Order]]:
        """
        Place an order for the current cart

        Args:
            shipping: Delivery address and phone

        Returns:
            Tuple of (success, message, order)
        """
        if not self.check_access():
            return False, "Checkout is not available", None

        missing = shipping.missing_fields()
        if missing:
            error = ValidationError(REQUIRED_FIELDS_MESSAGE, {"missing": missing})
            logger.info(f"[Checkout] Validation failed, missing: {missing}")
            return False, error.message, None

        if self._placing_order:
            return False, "Your order is already being placed", None

        order_request = self.build_order_request(shipping)
        logger.info(f"[Checkout] Placing order with {len(order_request.items)} lines, total {self.cart.total:.2f}")

        self._placing_order = True
        try:
            order = await self.backend.create_order(order_request)
        except StorefrontError as e:
            logger.error(f"[Checkout] Order creation failed: {e.to_dict()}")
            return False, ErrorHandler.user_message(e, ORDER_FAILED_MESSAGE), None
        except Exception as e:
            logger.error(f"[Checkout] Unexpected checkout error: {e}", exc_info=True)
            return False, ORDER_FAILED_MESSAGE, None
        finally:
            self._placing_order = False

        self.cart.remove_purchased({line.product_id: line.quantity for line in order_request.items})
        logger.info(f"[Checkout] Order {order.id} placed, status {order.status_value}")
        self.navigator.redirect(f"/orders/{order.id}")
        return True, "Order placed successfully", order
