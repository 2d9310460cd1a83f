"""Typed structures for the admin dashboard report"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any

from .catalog import Product


@dataclass
class MonthlyOrderCount:
    month: str
    count: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MonthlyOrderCount':
        return cls(month=str(data['month']), count=int(data.get('count', 0)))


@dataclass
class ProductSales:
    name: str
    quantity_sold: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProductSales':
        return cls(name=data['name'], quantity_sold=int(data.get('quantitySold', 0)))


@dataclass
class CustomerSummary:
    """Top-customer row; the backend sends a loose subset of these fields"""
    name: str
    email: Optional[str] = None
    order_count: int = 0
    total_spent: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CustomerSummary':
        return cls(
            name=data.get('name') or data.get('email') or '',
            email=data.get('email'),
            order_count=int(data.get('orderCount') or data.get('orders') or 0),
            total_spent=float(data.get('totalSpent') or data.get('total') or 0)
        )


@dataclass
class DashboardStats:
    """Aggregates shown on the admin dashboard"""
    total_orders: int = 0
    completed_orders: int = 0
    total_revenue: float = 0.0
    active_customers: int = 0
    low_stock_products: List[Product] = field(default_factory=list)
    top_customers: List[CustomerSummary] = field(default_factory=list)
    orders_per_month: List[MonthlyOrderCount] = field(default_factory=list)
    top_products: List[ProductSales] = field(default_factory=list)

    @property
    def average_order_value(self) -> float:
        if self.completed_orders <= 0:
            return 0.0
        return self.total_revenue / self.completed_orders

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DashboardStats':
        return cls(
            total_orders=int(data.get('totalOrders', 0)),
            completed_orders=int(data.get('completedOrders', 0)),
            total_revenue=float(data.get('totalRevenue', 0)),
            active_customers=int(data.get('activeCustomers', 0)),
            low_stock_products=[Product.from_dict(p) for p in data.get('lowStockProducts') or []],
            top_customers=[CustomerSummary.from_dict(c) for c in data.get('topCustomers') or []],
            orders_per_month=[MonthlyOrderCount.from_dict(m) for m in data.get('ordersPerMonth') or []],
            top_products=[ProductSales.from_dict(p) for p in data.get('topProducts') or []]
        )
