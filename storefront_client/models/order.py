"""Order models and the order status vocabulary"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Union
from datetime import datetime
from enum import Enum


class OrderStatus(Enum):
    """Statuses the backend may report for an order"""
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"

    @classmethod
    def parse(cls, value: Any) -> Union['OrderStatus', str]:
        """Return the enum member, or the raw string for values we don't know"""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            return str(value)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp from the backend, None if unparseable"""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return None


@dataclass
class OrderItem:
    """One purchased line, priced at the time of purchase"""
    product_id: Optional[int]
    product_name: str
    quantity: int
    unit_price: float = 0.0
    id: Optional[int] = None
    line_total: Optional[float] = None

    @property
    def total(self) -> float:
        if self.line_total is not None:
            return self.line_total
        return self.unit_price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'productId': self.product_id,
            'productName': self.product_name,
            'quantity': self.quantity,
            'priceAtPurchase': self.unit_price,
            'lineTotal': self.total
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OrderItem':
        """Create OrderItem from dictionary

        The unit price arrives as `priceAtPurchase` or `price` depending on
        the endpoint.
        """
        price = data.get('priceAtPurchase')
        if price is None:
            price = data.get('price', 0)
        product_id = data.get('productId')
        line_total = data.get('lineTotal')
        return cls(
            id=data.get('id'),
            product_id=int(product_id) if product_id is not None else None,
            product_name=data.get('productName') or '',
            quantity=int(data.get('quantity', 0)),
            unit_price=float(price or 0),
            line_total=float(line_total) if line_total is not None else None
        )


@dataclass(frozen=True)
class Order:
    """Server-confirmed purchase record; read-only on the client"""
    id: int
    status: Union[OrderStatus, str]
    shipping_address: str
    total_amount: float
    items: List[OrderItem] = field(default_factory=list)
    created_at: Optional[datetime] = None
    phone: Optional[str] = None

    @property
    def status_value(self) -> str:
        return self.status.value if isinstance(self.status, OrderStatus) else self.status

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'status': self.status_value,
            'shippingAddress': self.shipping_address,
            'phone': self.phone,
            'totalAmount': self.total_amount,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'items': [item.to_dict() for item in self.items]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Order':
        """Create Order from dictionary

        Accepts `totalAmount` or `total`; when neither is sent the amount is
        summed from the items.
        """
        items = [OrderItem.from_dict(item) for item in data.get('items') or []]
        total = data.get('totalAmount')
        if total is None:
            total = data.get('total')
        if total is None:
            total = sum(item.total for item in items)
        return cls(
            id=int(data['id']),
            status=OrderStatus.parse(data.get('status', OrderStatus.PENDING.value)),
            shipping_address=data.get('shippingAddress') or '',
            total_amount=float(total),
            items=items,
            created_at=parse_timestamp(data.get('createdAt')),
            phone=data.get('phone')
        )


@dataclass
class OrderLine:
    """{productId, quantity} entry of an order-creation request"""
    product_id: int
    quantity: int

    def to_dict(self) -> Dict[str, Any]:
        return {'productId': self.product_id, 'quantity': self.quantity}


@dataclass
class ShippingDetails:
    """Delivery information entered at checkout"""
    address: str
    phone: str

    def missing_fields(self) -> List[str]:
        """Names of required fields that are blank"""
        missing = []
        if not (self.address or '').strip():
            missing.append('address')
        if not (self.phone or '').strip():
            missing.append('phone')
        return missing


@dataclass
class CreateOrderRequest:
    items: List[OrderLine]
    shipping_address: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'items': [line.to_dict() for line in self.items],
            'shippingAddress': self.shipping_address
        }
