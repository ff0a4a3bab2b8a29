import logging
from typing import Any, Optional, Tuple

from .api import HttpStorefrontApi
from .auth import AuthSession
from .config import Settings, settings as default_settings
from .domain import Product, product_from_api, user_from_api
from .errors import get_error_message
from .normalize import normalize
from .notify import Notifier, ToastLog
from .store import CartStore, ClientState, WishlistStore

log = logging.getLogger(__name__)


def _unwrap_record(response: Any, key: str) -> Optional[dict]:
    """{"data": {...}}, {"data": {key: {...}}}, {key: {...}} или сам объект"""
    if not isinstance(response, dict):
        return None
    data = response.get("data", response)
    if isinstance(data, dict) and isinstance(data.get(key), dict):
        return data[key]
    if isinstance(response.get(key), dict):
        return response[key]
    return data if isinstance(data, dict) else None


class Storefront:
    """
    Корень приложения: одна сессия, одна корзина, одно избранное.
    Никаких глобальных синглтонов: UI хранит экземпляр в своей сессии.
    """

    def __init__(self, api: Any, notifier: Notifier, settings: Settings):
        self.api = api
        self.notifier = notifier
        self.settings = settings
        self.auth = AuthSession()
        self.state = ClientState()
        self.cart = CartStore(api, self.auth, notifier, self.state).bind()
        self.wishlist = WishlistStore(notifier, self.state)

    # --- каталог ---

    async def load_catalog(self, **params: Any) -> Tuple[Product, ...]:
        try:
            response = await self.api.get_products(params or None)
        except Exception as exc:
            log.error("Failed to fetch products: %s", exc)
            self.notifier.error(get_error_message(exc))
            return ()
        raw = normalize(response, "products")
        return tuple(product_from_api(p) for p in raw if isinstance(p, dict))

    async def load_product(self, product_id: str) -> Optional[Product]:
        try:
            response = await self.api.get_product(product_id)
        except Exception as exc:
            log.error("Failed to fetch product %s: %s", product_id, exc)
            self.notifier.error(get_error_message(exc))
            return None
        raw = _unwrap_record(response, "product")
        return product_from_api(raw) if raw else None

    # --- вход ---

    async def restore_session(self) -> None:
        """Проверяет cookie-сессию; при ответе без пользователя остаётся гостем"""
        try:
            response = await self.api.get_current_user()
        except Exception as exc:
            log.info("No active session: %s", exc)
            await self.auth.logout()
            return
        raw = _unwrap_record(response, "user")
        if raw:
            await self.auth.login(user_from_api(raw))

    async def sign_in(self, email: str, password: str) -> bool:
        try:
            response = await self.api.login(email, password)
        except Exception as exc:
            log.error("Login failed: %s", exc)
            self.notifier.error(get_error_message(exc))
            return False
        raw = _unwrap_record(response, "user")
        if not raw:
            self.notifier.error("Login failed")
            return False
        await self.auth.login(user_from_api(raw))
        self.notifier.success("Logged in")
        return True

    async def sign_out(self) -> None:
        try:
            await self.api.logout()
        except Exception as exc:
            log.warning("Logout request failed: %s", exc)
        finally:
            await self.auth.logout()


def create_storefront(
    settings: Optional[Settings] = None,
    api: Any = None,
    notifier: Optional[Notifier] = None,
) -> Storefront:
    settings = settings or default_settings
    api = api or HttpStorefrontApi(settings.api_url, settings.api_timeout)
    return Storefront(api, notifier or ToastLog(), settings)
