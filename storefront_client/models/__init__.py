"""Data models for the storefront client"""

from .session import Session, UserProfile, Role
from .catalog import ApiResponse, Product, Category, Page, UploadedFile
from .cart import CartItem
from .order import Order, OrderItem, OrderStatus, OrderLine, ShippingDetails, CreateOrderRequest
from .reports import DashboardStats, MonthlyOrderCount, ProductSales, CustomerSummary

__all__ = [
    'Session',
    'UserProfile',
    'Role',
    'ApiResponse',
    'Product',
    'Category',
    'Page',
    'UploadedFile',
    'CartItem',
    'Order',
    'OrderItem',
    'OrderStatus',
    'OrderLine',
    'ShippingDetails',
    'CreateOrderRequest',
    'DashboardStats',
    'MonthlyOrderCount',
    'ProductSales',
    'CustomerSummary'
]
