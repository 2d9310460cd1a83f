"""Cart entry model"""

from dataclasses import dataclass
from typing import Dict, Any

from .catalog import Product


@dataclass
class CartItem:
    """Product snapshot plus the quantity selected for purchase"""
    product: Product
    quantity: int

    @property
    def product_id(self) -> int:
        return self.product.id

    @property
    def subtotal(self) -> float:
        """Calculate subtotal for this item"""
        return self.product.price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for persistence"""
        return {
            'product': self.product.to_dict(),
            'quantity': self.quantity
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CartItem':
        """Create CartItem from dictionary

        Raises:
            ValueError: if the stored quantity is not positive
        """
        quantity = int(data['quantity'])
        if quantity < 1:
            raise ValueError(f"Cart quantity must be at least 1, got {quantity}")
        return cls(product=Product.from_dict(data['product']), quantity=quantity)
