import asyncio
import logging
import os
import sys

import streamlit as st

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from storefront.config import settings
from storefront.notify import ERROR
from storefront.service import create_storefront
from storefront.specs import spec_rows
from storefront.transforms import by_brand, by_price_range, effective_price, in_stock

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)


def run(coro):
    """Синхронная обёртка для вызовов из UI"""
    return asyncio.run(coro)


def format_price(amount: float) -> str:
    return f"{settings.currency}{amount:,.2f}"


# ============ Инициализация ============
st.set_page_config(
    page_title="Laptop Store",
    page_icon="💻",
    layout="wide",
    initial_sidebar_state="expanded",
)

if "storefront" not in st.session_state:
    shop = create_storefront(settings)
    run(shop.restore_session())
    st.session_state.storefront = shop

shop = st.session_state.storefront


def flush_toasts():
    for toast in shop.notifier.drain():
        st.toast(toast.message, icon="❌" if toast.level == ERROR else "✅")


def add_to_cart_button(product, qty=1, key=""):
    if st.button("➕ В корзину", key=f"add_{key}{product.id}", disabled=product.stock <= 0):
        run(shop.cart.add_item(product, qty))
        st.rerun()


def wishlist_button(product, key=""):
    if shop.wishlist.is_in_wishlist(product.id):
        if st.button("💔", key=f"unwish_{key}{product.id}"):
            shop.wishlist.remove_item(product.id)
            st.rerun()
    elif st.button("❤️", key=f"wish_{key}{product.id}"):
        shop.wishlist.add_item(product)
        st.rerun()


# ============ SIDEBAR ============
with st.sidebar:
    st.header("💻 Laptop Store")
    page = st.radio(
        "Раздел:",
        ["🏪 Каталог", "🔍 Товар", "🛒 Корзина", "❤️ Избранное"],
        label_visibility="collapsed",
    )
    st.divider()

    if shop.auth.is_authenticated:
        st.success(f"👤 {shop.auth.user.name or shop.auth.user.email}")
        if st.button("Выйти", key="logout"):
            run(shop.sign_out())
            st.rerun()
    elif not shop.auth.is_login_modal_open:
        if st.button("Войти", key="open_login"):
            shop.auth.open_login_modal()
            st.rerun()

    if shop.auth.is_login_modal_open:
        st.subheader("🔐 Вход")
        with st.form("login_form"):
            email = st.text_input("Email")
            password = st.text_input("Пароль", type="password")
            submitted = st.form_submit_button("Войти")
        if submitted:
            run(shop.sign_in(email, password))
            st.rerun()
        if st.button("Отмена", key="cancel_login"):
            shop.auth.close_login_modal()
            st.rerun()

    st.divider()
    st.metric("🛒 Товаров в корзине", shop.cart.total_items)
    st.metric("💰 Сумма", format_price(shop.cart.total_price))


# ============ PAGE: КАТАЛОГ ============
if page == "🏪 Каталог":
    st.header("🏪 Каталог")
    products = run(shop.load_catalog())

    col1, col2, col3 = st.columns(3)
    with col1:
        brands = sorted({p.brand for p in products if p.brand})
        selected_brand = st.selectbox("Бренд", ["Все"] + brands)
    with col2:
        max_price = int(max((effective_price(p) for p in products), default=0)) + 1
        price_range = st.slider("Цена", 0, max_price, (0, max_price))
    with col3:
        only_in_stock = st.checkbox("Только в наличии")

    filters = [by_price_range(*price_range)]
    if selected_brand != "Все":
        filters.append(by_brand(selected_brand))
    if only_in_stock:
        filters.append(in_stock())

    filtered = tuple(p for p in products if all(f(p) for f in filters))
    st.info(f"🔍 Найдено товаров: **{len(filtered)}**")

    if not filtered:
        st.warning("Товары не найдены.")
    for p in filtered:
        cols = st.columns([5, 2, 2, 1])
        with cols[0]:
            st.markdown(f"**{p.name}**")
            st.caption(p.brand)
        with cols[1]:
            if effective_price(p) != p.price:
                st.write(f"~~{format_price(p.price)}~~ {format_price(effective_price(p))}")
            else:
                st.write(format_price(p.price))
        with cols[2]:
            add_to_cart_button(p)
        with cols[3]:
            wishlist_button(p)
        st.divider()


# ============ PAGE: ТОВАР ============
elif page == "🔍 Товар":
    st.header("🔍 Карточка товара")
    product_id = st.text_input("ID товара")
    if product_id:
        product = run(shop.load_product(product_id))
        if product is None:
            st.warning(f"Товар `{product_id}` не найден")
        else:
            st.subheader(product.name)
            if product.images:
                st.image(product.images[0], width=320)
            st.write(product.description)
            st.markdown(f"### {format_price(effective_price(product))}")
            if product.discount and effective_price(product) != product.price:
                st.caption(f"-{product.discount.percentage:g}% от {format_price(product.price)}")

            qty = st.number_input("Кол-во", min_value=1, value=1, key="detail_qty")
            add_to_cart_button(product, qty, key="detail_")
            wishlist_button(product, key="detail_")

            rows = spec_rows(product.specifications)
            if rows:
                st.subheader("Технические характеристики")
                st.table({"Параметр": [r[0] for r in rows], "Значение": [r[1] for r in rows]})


# ============ PAGE: КОРЗИНА ============
elif page == "🛒 Корзина":
    st.header("🛒 Ваша корзина")
    cart = shop.cart

    if not shop.auth.is_authenticated:
        st.info("Войдите, чтобы увидеть корзину.")
    elif cart.error:
        st.error(f"❌ {cart.error}")

    if shop.auth.is_authenticated and not cart.items:
        st.info("🛍️ Корзина пуста. Перейдите в каталог!")

    for line in cart.items:
        if line.product is None:
            continue
        p = line.product
        cols = st.columns([5, 2, 2, 1])
        with cols[0]:
            st.write(f"**{p.name}**")
        with cols[1]:
            qty = st.number_input(
                "Кол-во",
                min_value=0,
                value=line.quantity,
                key=f"cart_qty_{p.id}",
                label_visibility="collapsed",
            )
            if qty != line.quantity:
                run(cart.update_quantity(p.id, int(qty)))
                st.rerun()
        with cols[2]:
            st.write(format_price(effective_price(p) * line.quantity))
        with cols[3]:
            if st.button("🗑️", key=f"remove_{p.id}"):
                run(cart.remove_item(p.id))
                st.rerun()

    if cart.items:
        st.divider()
        st.markdown(f"### 💰 Итого: **{format_price(cart.total_price)}**")
        if st.button("Очистить корзину", key="clear_cart"):
            run(cart.clear())
            st.rerun()


# ============ PAGE: ИЗБРАННОЕ ============
elif page == "❤️ Избранное":
    st.header("❤️ Избранное")
    entries = shop.wishlist.items

    if not entries:
        st.info("Список избранного пуст.")
    for entry in entries:
        p = entry.product
        cols = st.columns([5, 2, 2, 1])
        with cols[0]:
            st.write(f"**{p.name}**")
            st.caption(f"Добавлено: {entry.added_at[:16]}")
        with cols[1]:
            st.write(format_price(effective_price(p)))
        with cols[2]:
            add_to_cart_button(p, key="wl_")
        with cols[3]:
            wishlist_button(p, key="wl_")

    if entries and st.button("Очистить избранное", key="clear_wishlist"):
        shop.wishlist.clear()
        st.rerun()


flush_toasts()
