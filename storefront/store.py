"""
Клиентское состояние корзины и избранного.

Корзина авторитетна на сервере: каждый успешный ответ целиком заменяет
локальные строки (после нормализации). Избранное живёт только в памяти.
Все ошибки удалённых вызовов ловятся здесь: одно уведомление, прежнее
состояние не трогается, наружу ничего не бросается.

Параллельные вызовы не упорядочиваются: какой ответ пришёл последним,
тот и определяет итоговое состояние.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Optional, Tuple

from .api import CartApi
from .auth import AuthSession
from .domain import CartLine, Product, WishlistEntry
from .errors import get_error_message
from .frp import LOADING, EventBus, create_event, create_storefront_bus, initial_state
from .normalize import extract_items, has_items
from .notify import Notifier, ToastLog
from .transforms import in_wishlist, lines_from_items, total_items, total_price

log = logging.getLogger(__name__)


class ClientState:
    """Единственный владелец dict-состояния; меняется только через шину"""

    def __init__(self, bus: Optional[EventBus] = None):
        self._bus = bus or create_storefront_bus()
        self._state = initial_state()

    def get(self, key: str, default: Any = None) -> Any:
        return self._state.get(key, default)

    def dispatch(self, name: str, payload: Optional[dict] = None) -> dict:
        self._state = self._bus.publish(create_event(name, payload), self._state)
        return self._state


# ============ Корзина ============


class CartStore:
    def __init__(
        self,
        api: CartApi,
        auth: AuthSession,
        notifier: Notifier,
        state: Optional[ClientState] = None,
    ):
        self._api = api
        self._auth = auth
        self._notifier = notifier
        self._state = state or ClientState()

    # --- чтение (производные значения не кэшируются) ---

    @property
    def items(self) -> Tuple[CartLine, ...]:
        return self._state.get("items", ())

    @property
    def status(self) -> str:
        return self._state.get("cart_status")

    @property
    def is_loading(self) -> bool:
        return self.status == LOADING

    @property
    def error(self) -> Optional[str]:
        return self._state.get("error")

    @property
    def total_items(self) -> int:
        return total_items(self.items)

    @property
    def total_price(self) -> float:
        return total_price(self.items)

    def quantity_of(self, product_id: str) -> int:
        return sum(
            line.quantity
            for line in self.items
            if line.product is not None and line.product.id == product_id
        )

    # --- жизненный цикл ---

    def bind(self) -> "CartStore":
        """Перезагружать корзину при каждой смене входа"""
        self._auth.subscribe(self._on_auth_change)
        return self

    async def _on_auth_change(self, _is_authenticated: bool) -> None:
        await self.refresh()

    def _replace_items(self, response: Any) -> None:
        self._state.dispatch("CART_LOADED", {"items": lines_from_items(extract_items(response))})

    async def _fetch(self) -> bool:
        self._state.dispatch("CART_LOADING")
        try:
            response = await self._api.get_cart()
        except Exception as exc:
            log.error("Failed to fetch cart: %s", exc)
            self._state.dispatch("CART_FAILED", {"error": get_error_message(exc)})
            self._notifier.error("Failed to load cart")
            return False
        self._replace_items(response)
        return True

    async def refresh(self) -> None:
        """Гость -> пустая корзина без запроса; иначе загрузка с сервера"""
        if not self._auth.is_authenticated:
            self._state.dispatch("CART_RESET")
            return
        await self._fetch()

    async def _apply(self, response: Any) -> bool:
        # ответ без items: перечитываем корзину целиком
        if has_items(response):
            self._replace_items(response)
            return True
        log.warning("Cart response items missing, refetching cart")
        return await self._fetch()

    # --- мутации ---

    async def add_item(self, product: Product, quantity: int = 1) -> None:
        if not self._auth.is_authenticated:
            self._auth.set_pending_action(lambda: self.add_item(product, quantity))
            self._auth.open_login_modal()
            return
        try:
            response = await self._api.add_to_cart(product.id, int(quantity))
        except Exception as exc:
            log.error("Failed to add to cart: %s", exc)
            self._notifier.error("Failed to add to cart")
            return
        if await self._apply(response):
            self._notifier.success("Added to cart")

    async def remove_item(self, product_id: str) -> None:
        if not self._auth.is_authenticated:
            return
        try:
            response = await self._api.remove_from_cart(product_id)
        except Exception as exc:
            log.error("Failed to remove from cart: %s", exc)
            self._notifier.error("Failed to remove from cart")
            return
        if await self._apply(response):
            self._notifier.success("Removed from cart")

    async def update_quantity(self, product_id: str, quantity: int) -> None:
        if quantity <= 0:
            await self.remove_item(product_id)
            return
        if not self._auth.is_authenticated:
            return
        try:
            response = await self._api.update_quantity(product_id, int(quantity))
        except Exception as exc:
            log.error("Failed to update quantity: %s", exc)
            self._notifier.error("Failed to update quantity")
            return
        await self._apply(response)

    async def clear(self) -> None:
        if not self._auth.is_authenticated:
            return
        try:
            await self._api.clear_cart()
        except Exception as exc:
            log.error("Failed to clear cart: %s", exc)
            self._notifier.error("Failed to clear cart")
            return
        self._state.dispatch("CART_CLEARED")
        self._notifier.success("Cart cleared")


# ============ Избранное ============


def _now() -> str:
    return datetime.now().isoformat()


class WishlistStore:
    """Только локальные переходы: без сети и без ошибок"""

    def __init__(
        self,
        notifier: Optional[Notifier] = None,
        state: Optional[ClientState] = None,
        clock: Callable[[], str] = _now,
    ):
        self._notifier = notifier or ToastLog()
        self._state = state or ClientState()
        self._clock = clock

    @property
    def items(self) -> Tuple[WishlistEntry, ...]:
        return self._state.get("wishlist", ())

    def is_in_wishlist(self, product_id: str) -> bool:
        return in_wishlist(self.items, product_id)

    def add_item(self, product: Product) -> None:
        if self.is_in_wishlist(product.id):
            return
        self._state.dispatch("WISHLIST_ADD", {"product": product, "added_at": self._clock()})
        self._notifier.success("Added to wishlist")

    def remove_item(self, product_id: str) -> None:
        if not self.is_in_wishlist(product_id):
            return
        self._state.dispatch("WISHLIST_REMOVE", {"product_id": product_id})
        self._notifier.success("Removed from wishlist")

    def clear(self) -> None:
        self._state.dispatch("WISHLIST_CLEAR")
