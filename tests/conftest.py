import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from storefront.auth import AuthSession
from storefront.domain import User
from storefront.errors import AuthenticationError, NotFoundError, ServerError
from storefront.notify import ToastLog
from storefront.store import CartStore, ClientState, WishlistStore

RAW_PRODUCTS = [
    {
        "_id": "p1",
        "name": "ThinkPad T14",
        "brand": "Lenovo",
        "price": 100,
        "stock": 5,
        "specifications": '{"Display":"14" FHD","RAM":"16GB"}',
    },
    {
        "_id": "p2",
        "name": "Latitude 5420",
        "brand": {"name": "Dell"},
        "price": 50,
        "stock": 2,
        "discount": {"percentage": 10, "discountedPrice": 45},
    },
    {
        "_id": "p3",
        "name": "MacBook Air",
        "brand": "Apple",
        "price": 900,
        "stock": 0,
        "specifications": {"Chip": "M1"},
    },
]


class FakeStorefrontApi:
    """Сервер корзины в памяти: каждый вызов пишется в calls"""

    def __init__(self, catalog=None):
        self.catalog = {p["_id"]: p for p in (catalog or RAW_PRODUCTS)}
        self.server_items = []
        self.calls = []
        self.fail = set()
        self.omit_items = set()

    def _check(self, name, *args):
        self.calls.append((name,) + args)
        if name in self.fail:
            raise ServerError()

    def count(self, name):
        return sum(1 for c in self.calls if c[0] == name)

    def _cart_response(self, name):
        if name in self.omit_items:
            return {"success": True, "message": "ok"}
        return {
            "success": True,
            "data": {"items": [dict(i) for i in self.server_items]},
        }

    async def get_cart(self):
        self._check("get_cart")
        return {"success": True, "data": {"items": [dict(i) for i in self.server_items]}}

    async def add_to_cart(self, product_id, quantity=1):
        self._check("add_to_cart", product_id, quantity)
        for item in self.server_items:
            if item["product"]["_id"] == product_id:
                item["quantity"] += quantity
                break
        else:
            self.server_items.append({"product": self.catalog[product_id], "quantity": quantity})
        return self._cart_response("add_to_cart")

    async def remove_from_cart(self, product_id):
        self._check("remove_from_cart", product_id)
        self.server_items = [i for i in self.server_items if i["product"]["_id"] != product_id]
        return self._cart_response("remove_from_cart")

    async def update_quantity(self, product_id, quantity):
        self._check("update_quantity", product_id, quantity)
        for item in self.server_items:
            if item["product"]["_id"] == product_id:
                item["quantity"] = quantity
        return self._cart_response("update_quantity")

    async def clear_cart(self):
        self._check("clear_cart")
        self.server_items = []
        return {"success": True, "data": {"message": "Cart cleared"}}

    async def get_products(self, params=None):
        self._check("get_products", params)
        return {"success": True, "data": {"products": list(self.catalog.values())}}

    async def get_product(self, product_id):
        self._check("get_product", product_id)
        if product_id not in self.catalog:
            raise NotFoundError("Product not found")
        return {"success": True, "data": self.catalog[product_id]}

    async def login(self, email, password):
        self._check("login", email)
        if password != "secret":
            raise AuthenticationError("Invalid email or password.")
        return {"data": {"user": {"_id": "u1", "name": "Asha", "email": email, "role": "user"}}}

    async def logout(self):
        self._check("logout")
        return {"success": True}

    async def get_current_user(self):
        self._check("get_current_user")
        raise AuthenticationError()


@pytest.fixture
def api():
    return FakeStorefrontApi()


@pytest.fixture
def toasts():
    return ToastLog()


@pytest.fixture
def user():
    return User(id="u1", name="Asha", email="asha@example.com")


@pytest.fixture
def guest_auth():
    return AuthSession()


@pytest.fixture
def auth(user):
    return AuthSession(user)


@pytest.fixture
def cart(api, auth, toasts):
    return CartStore(api, auth, toasts).bind()


@pytest.fixture
def guest_cart(api, guest_auth, toasts):
    return CartStore(api, guest_auth, toasts).bind()


@pytest.fixture
def wishlist(toasts):
    return WishlistStore(toasts, ClientState(), clock=lambda: "2025-01-01T10:00:00")
