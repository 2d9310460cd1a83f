"""Cart store for the locally persisted shopping cart"""

import json
import threading
from dataclasses import replace
from typing import Dict, List, Optional, Any

from ..models.cart import CartItem
from ..models.catalog import Product
from ..storage.base import KeyValueStorage
from ..utils.logger import get_logger

logger = get_logger(__name__)

CART_KEY = "cart"


class CartStore:
    """Persisted, ordered mapping from product id to cart entry

    Every mutation runs under one lock and rewrites the whole cart to
    storage before returning. Totals are derived on each access.
    """

    def __init__(self, storage: KeyValueStorage):
        """
        Initialize the cart, hydrating it from storage

        Args:
            storage: Key-value storage holding the `cart` key
        """
        self.storage = storage
        self._lock = threading.RLock()
        self._items: Dict[int, CartItem] = self._load()
        logger.info(f"[Cart] Loaded {len(self._items)} entries from storage")

    # ================================
    # Reads
    # ================================

    @property
    def items(self) -> List[CartItem]:
        """Copies of the entries in insertion order"""
        with self._lock:
            return [self._copy(item) for item in self._items.values()]

    @property
    def total(self) -> float:
        return sum(item.product.price * item.quantity for item in self._items.values())

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self._items.values())

    def is_empty(self) -> bool:
        return not self._items

    def get_item(self, product_id: int) -> Optional[CartItem]:
        item = self._items.get(product_id)
        return self._copy(item) if item else None

    def can_add_more(self, product_id: int) -> bool:
        """Whether the UI should offer another unit of this product

        Stock is only a hint here; mutations are never clamped.
        """
        item = self._items.get(product_id)
        if item is None:
            return False
        return item.quantity < item.product.quantity_available

    def summary(self) -> Dict[str, Any]:
        """Cart summary for display"""
        return {
            'items': [
                {**item.to_dict(), 'subtotal': item.subtotal}
                for item in self._items.values()
            ],
            'item_count': self.item_count,
            'total': self.total
        }

    # ================================
    # Mutations
    # ================================

    def add_item(self, product: Product, quantity: int = 1) -> CartItem:
        """
        Add product to cart or increase the quantity of its entry

        Args:
            product: Product snapshot
            quantity: Units to add

        Returns:
            Copy of the resulting cart entry

        Raises:
            ValueError: if quantity is not positive
        """
        if quantity < 1:
            raise ValueError(f"Quantity to add must be at least 1, got {quantity}")

        with self._lock:
            existing = self._items.get(product.id)
            if existing:
                existing.quantity += quantity
                item = existing
            else:
                # Snapshot; later edits to the caller's product don't reprice the cart
                item = CartItem(product=replace(product), quantity=quantity)
                self._items[product.id] = item
            self._persist()
            result = self._copy(item)

        logger.info(f"[Cart] Added {quantity}x {product.name} - {self.item_count} items, total {self.total:.2f}")
        return result

    def remove_item(self, product_id: int) -> None:
        """Remove entry for product; no-op when absent"""
        with self._lock:
            removed = self._items.pop(product_id, None)
            if removed:
                self._persist()
        if removed:
            logger.info(f"[Cart] Removed {removed.product.name}")

    def update_quantity(self, product_id: int, quantity: int) -> None:
        """
        Set the quantity of an entry

        A quantity of zero or less removes the entry. Unknown products are
        ignored.
        """
        if quantity <= 0:
            self.remove_item(product_id)
            return

        with self._lock:
            item = self._items.get(product_id)
            if item is None:
                logger.debug(f"[Cart] update_quantity for unknown product {product_id} ignored")
                return
            item.quantity = quantity
            self._persist()
        logger.info(f"[Cart] Updated {item.product.name} quantity to {quantity}")

    def clear_cart(self) -> None:
        with self._lock:
            self._items.clear()
            self._persist()
        logger.info("[Cart] Cleared")

    def remove_purchased(self, quantities: Dict[int, int]) -> None:
        """
        Take ordered units out of the cart after a successful order

        Units added after the order was built stay in the cart. When nothing
        changed in the meantime this empties the cart.

        Args:
            quantities: Ordered quantity per product id
        """
        with self._lock:
            for product_id, ordered in quantities.items():
                item = self._items.get(product_id)
                if item is None:
                    continue
                remaining = item.quantity - ordered
                if remaining > 0:
                    item.quantity = remaining
                else:
                    del self._items[product_id]
            self._persist()
            left = len(self._items)
        logger.info(f"[Cart] Removed purchased items, {left} entries left")

    # ================================
    # Persistence
    # ================================

    @staticmethod
    def _copy(item: CartItem) -> CartItem:
        return CartItem(product=replace(item.product), quantity=item.quantity)

    def _persist(self) -> None:
        payload = [item.to_dict() for item in self._items.values()]
        self.storage.set(CART_KEY, json.dumps(payload))

    def _load(self) -> Dict[int, CartItem]:
        raw = self.storage.get(CART_KEY)
        if not raw:
            return {}
        try:
            entries = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"[Cart] Stored cart is unreadable, starting empty: {e}")
            return {}
        if not isinstance(entries, list):
            logger.warning("[Cart] Stored cart is not a list, starting empty")
            return {}

        items: Dict[int, CartItem] = {}
        for entry in entries:
            try:
                item = CartItem.from_dict(entry)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"[Cart] Dropping malformed cart entry: {e}")
                continue
            if item.product_id in items:
                items[item.product_id].quantity += item.quantity
            else:
                items[item.product_id] = item
        return items
