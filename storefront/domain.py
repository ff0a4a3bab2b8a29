from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .specs import parse_field


@dataclass(frozen=True)
class Discount:
    percentage: float
    discounted_price: float


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: float
    stock: int = 0
    slug: str = ""
    brand: str = ""
    description: str = ""
    discount: Optional[Discount] = None
    specifications: Any = None  # сырой blob, разбирается только при показе
    images: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CartLine:
    product: Optional[Product]
    quantity: int


@dataclass(frozen=True)
class WishlistEntry:
    product: Product
    added_at: str


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    role: str = "customer"

    @property
    def is_admin(self) -> bool:
        return (self.role or "").lower() in ("admin", "superadmin")


# ============ Конструкторы из ответов API ============


def _to_number(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def discount_from_api(raw: Any) -> Optional[Discount]:
    """Скидка приходит объектом или JSON-строкой из админки"""
    data = parse_field(raw, None)
    if not isinstance(data, dict):
        return None
    discounted = data.get("discountedPrice", data.get("discounted_price"))
    if discounted is None:
        return None
    return Discount(
        percentage=_to_number(data.get("percentage")),
        discounted_price=_to_number(discounted),
    )


def product_from_api(raw: dict) -> Product:
    """Собирает иммутабельный Product из сырого dict каталога"""
    images = raw.get("images") or []
    if isinstance(images, str):
        images = [images]
    elif not isinstance(images, (list, tuple)):
        images = []
    primary = raw.get("product_primary_image")
    if primary and primary not in images:
        images = [primary] + list(images)

    try:
        stock = int(raw.get("stock") or 0)
    except (TypeError, ValueError):
        stock = 0

    brand = raw.get("brand") or ""
    if isinstance(brand, dict):  # populated ref
        brand = brand.get("name") or ""

    return Product(
        id=str(raw.get("_id") or raw.get("id") or ""),
        name=str(raw.get("name") or raw.get("title") or ""),
        price=_to_number(raw.get("price")),
        stock=stock,
        slug=str(raw.get("slug") or ""),
        brand=str(brand),
        description=str(raw.get("description") or ""),
        discount=discount_from_api(raw.get("discount")),
        specifications=raw.get("specifications"),
        images=tuple(str(i) for i in images if i),
    )


def user_from_api(raw: dict) -> User:
    return User(
        id=str(raw.get("_id") or raw.get("id") or ""),
        name=str(raw.get("name") or raw.get("username") or ""),
        email=str(raw.get("email") or ""),
        role=str(raw.get("role") or "customer"),
    )
