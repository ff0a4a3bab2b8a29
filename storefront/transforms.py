from functools import reduce
from typing import Any, Callable, Iterable, Optional, Tuple

from .domain import CartLine, Product, WishlistEntry, product_from_api


# ============ Цены (чистые функции) ============


def effective_price(product: Optional[Product]) -> float:
    """Цена со скидкой, если скидка положительная, иначе базовая"""
    if product is None:
        return 0.0
    discount = product.discount
    if discount is not None and discount.percentage > 0:
        return discount.discounted_price
    return product.price or 0.0


def total_items(lines: Iterable[CartLine]) -> int:
    """Сумма количеств через reduce"""
    return reduce(lambda acc, line: acc + line.quantity, lines, 0)


def total_price(lines: Iterable[CartLine]) -> float:
    """Сумма quantity × effective_price; строка без товара даёт 0"""
    return reduce(
        lambda acc, line: acc + effective_price(line.product) * line.quantity, lines, 0
    )


# ============ Строки корзины из ответа API ============


def line_from_item(item: Any) -> Optional[CartLine]:
    if not isinstance(item, dict):
        return None
    try:
        qty = int(item.get("quantity") or 0)
    except (TypeError, ValueError):
        return None
    if qty < 1:
        return None

    raw_product = item.get("product")
    if isinstance(raw_product, dict):
        product = product_from_api(raw_product)
    else:
        product = None  # товар удалён из каталога или не populated
    return CartLine(product=product, quantity=qty)


def lines_from_items(items: Iterable[Any]) -> Tuple[CartLine, ...]:
    """Нормализованный список items -> кортеж CartLine (мусор отбрасывается)"""
    return tuple(line for line in map(line_from_item, items) if line is not None)


# ============ Избранное (иммутабельно, идемпотентно) ============


def in_wishlist(entries: Tuple[WishlistEntry, ...], product_id: str) -> bool:
    return any(e.product.id == product_id for e in entries)


def wishlist_add(
    entries: Tuple[WishlistEntry, ...], product: Product, added_at: str
) -> Tuple[WishlistEntry, ...]:
    """Повторное добавление того же товара ничего не меняет"""
    if in_wishlist(entries, product.id):
        return entries
    return entries + (WishlistEntry(product=product, added_at=added_at),)


def wishlist_remove(
    entries: Tuple[WishlistEntry, ...], product_id: str
) -> Tuple[WishlistEntry, ...]:
    if not in_wishlist(entries, product_id):
        return entries
    return tuple(filter(lambda e: e.product.id != product_id, entries))


# ============ Замыкания-фильтры каталога (HOF) ============


def by_brand(brand: str) -> Callable[[Product], bool]:
    return lambda p: (p.brand or "").lower() == (brand or "").lower()


def by_price_range(min_price: float, max_price: float) -> Callable[[Product], bool]:
    """Фильтр по эффективной цене"""
    return lambda p: min_price <= effective_price(p) <= max_price


def in_stock() -> Callable[[Product], bool]:
    return lambda p: p.stock > 0
