"""Catalog models: products, categories and the paging/response wrappers"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Callable, Generic, TypeVar

T = TypeVar('T')


def _optional_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


def _optional_int(value: Any) -> Optional[int]:
    return int(value) if value is not None else None


@dataclass
class ApiResponse:
    """Envelope every backend response is wrapped in"""
    success: bool
    message: str = ""
    data: Any = None

    @classmethod
    def from_dict(cls, body: Any) -> 'ApiResponse':
        if not isinstance(body, dict):
            # Some endpoints answer with an empty body
            return cls(success=True, message="", data=body)
        return cls(
            success=bool(body.get('success', True)),
            message=body.get('message') or "",
            data=body.get('data')
        )


@dataclass
class Product:
    """Product snapshot as listed by the catalog"""
    id: int
    name: str
    price: float
    quantity_available: int = 0
    low_stock_threshold: int = 0
    image_url: Optional[str] = None
    discount_percentage: Optional[float] = None
    description: Optional[str] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = None

    @property
    def in_stock(self) -> bool:
        return self.quantity_available > 0

    @property
    def is_low_stock(self) -> bool:
        return 0 < self.quantity_available <= self.low_stock_threshold

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the backend's wire format"""
        return {
            'id': self.id,
            'name': self.name,
            'imageUrl': self.image_url,
            'price': self.price,
            'discountPercentage': self.discount_percentage,
            'description': self.description,
            'categoryId': self.category_id,
            'categoryName': self.category_name,
            'quantityAvailable': self.quantity_available,
            'lowStockThreshold': self.low_stock_threshold
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Product':
        """Create Product from dictionary"""
        return cls(
            id=int(data['id']),
            name=data['name'],
            price=float(data['price']),
            quantity_available=int(data.get('quantityAvailable') or 0),
            low_stock_threshold=int(data.get('lowStockThreshold') or 0),
            image_url=data.get('imageUrl'),
            discount_percentage=_optional_float(data.get('discountPercentage')),
            description=data.get('description'),
            category_id=_optional_int(data.get('categoryId')),
            category_name=data.get('categoryName')
        )


@dataclass
class Category:
    id: int
    name: str
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'name': self.name, 'description': self.description}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Category':
        return cls(id=int(data['id']), name=data['name'], description=data.get('description'))


@dataclass
class Page(Generic[T]):
    """One page of a paged listing"""
    content: List[T] = field(default_factory=list)
    total_elements: int = 0
    total_pages: int = 0
    size: int = 0
    number: int = 0

    @property
    def has_next(self) -> bool:
        return self.number + 1 < self.total_pages

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]], item_factory: Callable[[Dict[str, Any]], T]) -> 'Page[T]':
        """Create Page from dictionary, converting each entry with item_factory"""
        data = data or {}
        content = [item_factory(item) for item in data.get('content') or []]
        return cls(
            content=content,
            total_elements=int(data.get('totalElements', len(content))),
            total_pages=int(data.get('totalPages', 1 if content else 0)),
            size=int(data.get('size', len(content))),
            number=int(data.get('number', 0))
        )


@dataclass
class UploadedFile:
    filename: str
    url: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UploadedFile':
        return cls(filename=data['filename'], url=data['url'])
