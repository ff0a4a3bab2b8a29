import logging
from http.cookiejar import CookieJar
from typing import Any, Dict, Optional, Protocol

import httpx

from .errors import NetworkError, RequestTimeout, error_from_status

log = logging.getLogger(__name__)

HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


# ============ Контракты коллабораторов ============


class CartApi(Protocol):
    async def get_cart(self) -> Any: ...

    async def add_to_cart(self, product_id: str, quantity: int = 1) -> Any: ...

    async def remove_from_cart(self, product_id: str) -> Any: ...

    async def update_quantity(self, product_id: str, quantity: int) -> Any: ...

    async def clear_cart(self) -> Any: ...


class CatalogApi(Protocol):
    async def get_products(self, params: Optional[Dict[str, Any]] = None) -> Any: ...

    async def get_product(self, product_id: str) -> Any: ...


class AuthApi(Protocol):
    async def login(self, email: str, password: str) -> Any: ...

    async def logout(self) -> Any: ...

    async def get_current_user(self) -> Any: ...


# ============ HTTP-реализация ============


def raise_for_response(response: httpx.Response) -> Any:
    """2xx -> тело JSON (или {}), иначе исключение из errors"""
    try:
        payload = response.json() if response.content else {}
    except ValueError:
        log.error(
            "Failed parsing response JSON status=%s body=%s",
            response.status_code,
            (response.text or "")[:500],
        )
        payload = {}

    if response.is_success:
        return payload
    raise error_from_status(response.status_code, payload)


def _clean_params(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    # пустые значения в query не отправляем
    return {k: v for k, v in (params or {}).items() if v not in (None, "")}


class HttpStorefrontApi:
    """
    Корзина, каталог и вход поверх REST API магазина.
    Клиент httpx создаётся на каждый вызов; cookie сессии живут в общем jar.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._cookies = CookieJar()

    async def _request(self, method: str, path: str, json: Any = None, params=None) -> Any:
        log.debug("%s %s%s payload=%s", method, self.base_url, path, json)
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=HEADERS,
                cookies=self._cookies,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method, path, json=json, params=_clean_params(params)
                )
        except httpx.TimeoutException as exc:
            raise RequestTimeout() from exc
        except httpx.TransportError as exc:
            raise NetworkError() from exc

        log.debug("%s %s -> %s", method, path, response.status_code)
        return raise_for_response(response)

    # --- cart ---

    async def get_cart(self) -> Any:
        return await self._request("GET", "/cart")

    async def add_to_cart(self, product_id: str, quantity: int = 1) -> Any:
        return await self._request(
            "POST", "/cart", json={"productId": product_id, "quantity": quantity}
        )

    async def remove_from_cart(self, product_id: str) -> Any:
        return await self._request("DELETE", f"/cart/{product_id}")

    async def update_quantity(self, product_id: str, quantity: int) -> Any:
        return await self._request(
            "PUT", f"/cart/update/{product_id}", json={"quantity": quantity}
        )

    async def clear_cart(self) -> Any:
        return await self._request("DELETE", "/cart")

    # --- catalog ---

    async def get_products(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("GET", "/products", params=params)

    async def get_product(self, product_id: str) -> Any:
        return await self._request("GET", f"/products/{product_id}")

    # --- auth ---

    async def login(self, email: str, password: str) -> Any:
        return await self._request(
            "POST", "/auth/login", json={"email": email, "password": password}
        )

    async def logout(self) -> Any:
        return await self._request("POST", "/auth/logout")

    async def get_current_user(self) -> Any:
        return await self._request("GET", "/auth/me")
