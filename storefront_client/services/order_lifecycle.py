"""
Order lifecycle

Maps backend order statuses onto display categories and wraps the order
queries and the admin status change. The client keeps no transition graph:
whatever status the backend reports is accepted, and legality of a change is
decided by the backend.
"""

from enum import Enum
from typing import Dict, Optional, Tuple, Union

from ..backend_client import StorefrontBackendClient
from ..errors import ErrorHandler, StorefrontError
from ..models.catalog import Page
from ..models.order import Order, OrderStatus
from ..utils.logger import get_logger

logger = get_logger(__name__)


class StatusCategory(Enum):
    """Display categories for order statuses"""
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    FULFILLED = "fulfilled"
    TERMINAL_FAILED = "terminal-failed"
    UNKNOWN = "unknown"


STATUS_CATEGORIES: Dict[OrderStatus, StatusCategory] = {
    OrderStatus.PENDING: StatusCategory.PENDING,
    OrderStatus.ACCEPTED: StatusCategory.IN_PROGRESS,
    OrderStatus.CONFIRMED: StatusCategory.IN_PROGRESS,
    OrderStatus.SHIPPED: StatusCategory.IN_PROGRESS,
    OrderStatus.DELIVERED: StatusCategory.FULFILLED,
    OrderStatus.COMPLETED: StatusCategory.FULFILLED,
    OrderStatus.REJECTED: StatusCategory.TERMINAL_FAILED,
    OrderStatus.CANCELLED: StatusCategory.TERMINAL_FAILED,
}


def categorize(status: Union[OrderStatus, str]) -> StatusCategory:
    """Display category for a status; unrecognised values map to UNKNOWN"""
    parsed = OrderStatus.parse(status)
    if isinstance(parsed, OrderStatus):
        return STATUS_CATEGORIES[parsed]
    return StatusCategory.UNKNOWN


def is_final(status: Union[OrderStatus, str]) -> bool:
    """Whether the order has reached a fulfilled or failed end state"""
    return categorize(status) in (StatusCategory.FULFILLED, StatusCategory.TERMINAL_FAILED)


class OrderLifecycle:
    """Order queries and admin status changes"""

    def __init__(self, backend_client: StorefrontBackendClient):
        self.backend = backend_client

    def describe(self, order: Order) -> Dict[str, str]:
        return {
            'status': order.status_value,
            'category': categorize(order.status).value
        }

    async def fetch_order(self, order_id: int) -> Tuple[bool, str, Optional[Order]]:
        """
        Re-fetch an order; the only way its status changes on the client

        Returns:
            Tuple of (success, message, order)
        """
        try:
            order = await self.backend.get_order_by_id(order_id)
        except StorefrontError as e:
            logger.error(f"[Orders] Failed to load order {order_id}: {e.to_dict()}")
            return False, ErrorHandler.user_message(e, "Failed to load order details"), None
        return True, "", order

    async def fetch_my_orders(self, page: int = 0, size: int = 20) -> Tuple[bool, str, Optional[Page[Order]]]:
        try:
            orders = await self.backend.get_my_orders(page=page, size=size)
        except StorefrontError as e:
            logger.error(f"[Orders] Failed to load own orders: {e.to_dict()}")
            return False, "Failed to load orders", None
        return True, "", orders

    async def fetch_all_orders(self, page: int = 0, size: int = 50) -> Tuple[bool, str, Optional[Page[Order]]]:
        """Admin listing of every order"""
        try:
            orders = await self.backend.get_all_orders(page=page, size=size)
        except StorefrontError as e:
            logger.error(f"[Orders] Failed to load orders: {e.to_dict()}")
            return False, ErrorHandler.user_message(e, "Failed to load orders"), None
        return True, "", orders

    async def request_status_change(
        self,
        order_id: int,
        status: Union[OrderStatus, str]
    ) -> Tuple[bool, str, Optional[Order]]:
        """
        Ask the backend to move an order to a new status

        Any of the eight statuses may be requested. On success the order is
        re-fetched so the caller sees the status the backend actually holds.

        Returns:
            Tuple of (success, message, refreshed order)
        """
        parsed = OrderStatus.parse(status)
        if not isinstance(parsed, OrderStatus):
            return False, f"Failed to update order status: unknown status {status}", None

        try:
            await self.backend.update_order_status(order_id, parsed)
        except StorefrontError as e:
            error_msg = ErrorHandler.user_message(e, "Failed to update order status")
            logger.error(f"[Orders] Status change of order {order_id} to {parsed.value} rejected: {error_msg}")
            return False, f"Failed to update order status: {error_msg}", None

        logger.info(f"[Orders] Order {order_id} moved to {parsed.value}")
        # The change stands even if the re-fetch fails; order is then None
        _, _, order = await self.fetch_order(order_id)
        return True, f"Order status updated to {parsed.value}", order
