import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
import pytest
from storefront.config import Settings, load_settings
from storefront.notify import ERROR, SUCCESS
from storefront.service import create_storefront
from storefront.specs import spec_rows

SETTINGS = Settings(api_url="http://shop.test/api", api_timeout=5, currency="₹", log_level="INFO")


@pytest.fixture
def shop(api, toasts):
    return create_storefront(SETTINGS, api=api, notifier=toasts)


@pytest.mark.asyncio
async def test_load_catalog_normalizes_products(shop):
    products = await shop.load_catalog()
    assert [p.id for p in products] == ["p1", "p2", "p3"]
    assert products[1].brand == "Dell"
    assert spec_rows(products[0].specifications) == [("Display", '14" FHD'), ("RAM", "16GB")]


@pytest.mark.asyncio
async def test_load_catalog_failure_gives_empty_tuple(shop, api, toasts):
    api.fail.add("get_products")
    assert await shop.load_catalog() == ()
    assert toasts.toasts[-1].level == ERROR


@pytest.mark.asyncio
async def test_load_product(shop, toasts):
    product = await shop.load_product("p3")
    assert product.name == "MacBook Air"
    assert await shop.load_product("missing") is None
    assert toasts.toasts[-1].message == "Product not found"


@pytest.mark.asyncio
async def test_sign_in_runs_deferred_add(shop, api):
    product = (await shop.load_catalog())[0]
    await shop.cart.add_item(product, 2)
    assert shop.auth.is_login_modal_open

    assert not await shop.sign_in("asha@example.com", "wrong")
    assert api.count("add_to_cart") == 0

    assert await shop.sign_in("asha@example.com", "secret")
    assert shop.auth.user.name == "Asha"
    assert api.count("add_to_cart") == 1
    assert shop.cart.total_items == 2


@pytest.mark.asyncio
async def test_cart_and_wishlist_share_one_state(shop, toasts):
    product = (await shop.load_catalog())[2]
    shop.wishlist.add_item(product)
    assert shop.state.get("wishlist")[0].product == product
    assert toasts.toasts[-1].level == SUCCESS


@pytest.mark.asyncio
async def test_restore_session_without_cookie_stays_guest(shop):
    await shop.restore_session()
    assert not shop.auth.is_authenticated
    assert shop.cart.items == ()


@pytest.mark.asyncio
async def test_sign_out(shop, api):
    await shop.sign_in("asha@example.com", "secret")
    await shop.sign_out()
    assert api.count("logout") == 1
    assert not shop.auth.is_authenticated


def test_load_settings_from_env(monkeypatch):
    monkeypatch.setenv("STOREFRONT_API_URL", "https://api.example.com/v1/")
    monkeypatch.setenv("STOREFRONT_API_TIMEOUT", "12.5")
    monkeypatch.setenv("STOREFRONT_LOG_LEVEL", "debug")
    s = load_settings()
    assert s.api_url == "https://api.example.com/v1"
    assert s.api_timeout == 12.5
    assert s.log_level == "DEBUG"
