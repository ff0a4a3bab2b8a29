from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Union

from .ftypes import Maybe


# ============ Формы ответа API (tagged union) ============


@dataclass(frozen=True)
class BareList:
    """[...]"""

    items: list


@dataclass(frozen=True)
class WrappedList:
    """{"data": [...]}"""

    items: list


@dataclass(frozen=True)
class PagedList:
    """{"data": {"data": [...], "total": ...}}: пагинация админских списков"""

    items: list


@dataclass(frozen=True)
class KeyedList:
    """{"data": {key: [...]}} или {key: [...]}"""

    key: str
    items: list


@dataclass(frozen=True)
class Unrecognized:
    raw: Any


Payload = Union[BareList, WrappedList, PagedList, KeyedList, Unrecognized]


def _as_list(value: Any) -> Maybe[list]:
    return Maybe.some(value) if isinstance(value, list) else Maybe.nothing()


def decode_payload(response: Any, key: str) -> Payload:
    """Определяет форму ответа. Не бросает исключений"""
    if isinstance(response, list):
        return BareList(response)

    data = Maybe.of_key(response, "data")

    wrapped = data.bind(_as_list)
    if wrapped.is_some():
        return WrappedList(wrapped.value)

    paged = data.bind(lambda d: Maybe.of_key(d, "data")).bind(_as_list)
    if paged.is_some():
        return PagedList(paged.value)

    # сначала ключ внутри data, потом на верхнем уровне
    for container in (data.get_or_else(None), response):
        keyed = Maybe.of_key(container, key).bind(_as_list)
        if keyed.is_some():
            return KeyedList(key, keyed.value)

    return Unrecognized(response)


def normalize(response: Any, key: str) -> List[Any]:
    """
    Единая политика извлечения списка из ответа API.
    Возвращает сам вложенный список (без копирования) или [] для любой
    неизвестной формы, никогда None.
    """
    match decode_payload(response, key):
        case BareList(items) | WrappedList(items) | PagedList(items):
            return items
        case KeyedList(_, items):
            return items
        case Unrecognized():
            return []


# ============ Хелперы для корзины ============


def extract_items(response: Any) -> List[Any]:
    return normalize(response, "items")


def has_items(response: Any) -> bool:
    """Был ли в ответе сам список items (пусть и пустой)"""
    return not isinstance(decode_payload(response, "items"), Unrecognized)
