"""
Storefront Backend Client

Typed wrappers for every REST endpoint the storefront calls. All requests go
through HttpGateway, so credentials and token refresh are handled there.
"""

from typing import Dict, List, Optional, Any, BinaryIO, Union

from .gateway import HttpGateway
from .models.catalog import Category, Page, Product, UploadedFile
from .models.order import CreateOrderRequest, Order, OrderStatus
from .models.reports import DashboardStats
from .models.session import Session, UserProfile
from .utils.logger import get_logger

logger = get_logger(__name__)


class StorefrontBackendClient:
    """Client for all storefront backend APIs"""

    def __init__(self, gateway: HttpGateway):
        """
        Initialize the backend client

        Args:
            gateway: Request pipeline that attaches and refreshes credentials
        """
        self.gateway = gateway

    # ================================
    # AUTH APIs
    # ================================

    async def login_with_google(self, id_token: str) -> Session:
        """Exchange a Google id token for a storefront session"""
        response = await self.gateway.post("/auth/google", json_data={"idToken": id_token})
        return Session.from_auth_response(response.data or {})

    async def logout(self) -> None:
        """Invalidate the refresh token server-side"""
        await self.gateway.post("/auth/logout")

    # ================================
    # PRODUCT APIs
    # ================================

    async def get_products(
        self,
        category_id: Optional[int] = None,
        search: Optional[str] = None,
        page: Optional[int] = None,
        size: Optional[int] = None
    ) -> Page[Product]:
        """List products, optionally filtered by category or search text"""
        params = {"categoryId": category_id, "search": search, "page": page, "size": size}
        params = {key: value for key, value in params.items() if value is not None and value != ""}
        response = await self.gateway.get("/products", params=params or None)
        return Page.from_dict(response.data, Product.from_dict)

    async def create_product(self, product: Dict[str, Any]) -> Product:
        """Create product from all fields except id"""
        payload = {key: value for key, value in product.items() if key != "id"}
        response = await self.gateway.post("/products", json_data=payload)
        return Product.from_dict(response.data)

    async def update_product(self, product_id: int, changes: Dict[str, Any]) -> Product:
        """Update product with a partial set of fields"""
        response = await self.gateway.put(f"/products/{product_id}", json_data=changes)
        return Product.from_dict(response.data)

    async def delete_product(self, product_id: int) -> None:
        await self.gateway.delete(f"/products/{product_id}")

    # ================================
    # CATEGORY APIs
    # ================================

    async def get_categories(self) -> List[Category]:
        response = await self.gateway.get("/categories")
        return [Category.from_dict(item) for item in response.data or []]

    async def create_category(self, name: str, description: Optional[str] = None) -> Category:
        response = await self.gateway.post("/categories", json_data={"name": name, "description": description})
        return Category.from_dict(response.data)

    async def update_category(self, category_id: int, changes: Dict[str, Any]) -> Category:
        response = await self.gateway.put(f"/categories/{category_id}", json_data=changes)
        return Category.from_dict(response.data)

    async def delete_category(self, category_id: int) -> None:
        await self.gateway.delete(f"/categories/{category_id}")

    # ================================
    # ORDER APIs
    # ================================

    async def create_order(self, order_request: CreateOrderRequest) -> Order:
        """Submit an order built from the cart"""
        response = await self.gateway.post("/orders", json_data=order_request.to_dict())
        return Order.from_dict(response.data)

    async def get_my_orders(self, page: int = 0, size: int = 10) -> Page[Order]:
        """Get the current user's order history"""
        response = await self.gateway.get("/orders/my", params={"page": page, "size": size})
        return Page.from_dict(response.data, Order.from_dict)

    async def get_order_by_id(self, order_id: int) -> Order:
        response = await self.gateway.get(f"/orders/{order_id}")
        return Order.from_dict(response.data)

    # ================================
    # ADMIN APIs
    # ================================

    async def get_all_orders(self, page: int = 0, size: int = 50) -> Page[Order]:
        """List every customer's orders (admin)"""
        response = await self.gateway.get("/admin/orders", params={"page": page, "size": size})
        return Page.from_dict(response.data, Order.from_dict)

    async def update_order_status(self, order_id: int, status: Union[OrderStatus, str]) -> None:
        """Request a status change; the backend decides whether it is legal"""
        value = status.value if isinstance(status, OrderStatus) else status
        await self.gateway.put(f"/admin/orders/{order_id}/status", json_data={"status": value})

    async def get_users(self) -> List[UserProfile]:
        response = await self.gateway.get("/admin/users")
        return [UserProfile.from_dict(item) for item in response.data or []]

    async def make_admin(self, user_id: int) -> None:
        await self.gateway.post(f"/admin/users/{user_id}/make-admin")

    async def remove_admin(self, user_id: int) -> None:
        await self.gateway.post(f"/admin/users/{user_id}/remove-admin")

    async def create_admin(self, email: str, first_name: str, last_name: str, username: str) -> None:
        """Create an admin account for the given email"""
        payload = {
            "email": email,
            "firstName": first_name,
            "lastName": last_name,
            "username": username
        }
        await self.gateway.post("/admin/users/create-admin", json_data=payload)

    async def get_dashboard_stats(self) -> DashboardStats:
        response = await self.gateway.get("/admin/reports/dashboard")
        return DashboardStats.from_dict(response.data or {})

    # ================================
    # PROFILE APIs
    # ================================

    async def get_profile(self) -> UserProfile:
        response = await self.gateway.get("/profile")
        return UserProfile.from_dict(response.data)

    async def update_profile(self, **updates) -> UserProfile:
        """
        Update the current user's profile

        Args:
            **updates: Any of username, firstName, lastName, address, phone
        """
        allowed = {"username", "firstName", "lastName", "address", "phone"}
        unknown = set(updates) - allowed
        if unknown:
            raise ValueError(f"Unknown profile fields: {', '.join(sorted(unknown))}")
        response = await self.gateway.put("/profile", json_data=updates)
        return UserProfile.from_dict(response.data)

    # ================================
    # FILE APIs
    # ================================

    async def upload_image(self, filename: str, content: Union[bytes, BinaryIO],
                           content_type: str = "application/octet-stream") -> UploadedFile:
        """Upload an image as multipart form data"""
        files = {"file": (filename, content, content_type)}
        response = await self.gateway.post("/files/upload", files=files)
        return UploadedFile.from_dict(response.data)

    async def delete_image(self, filename: str) -> None:
        await self.gateway.delete(f"/files/{filename}")
