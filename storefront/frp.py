from dataclasses import dataclass
from datetime import datetime
from functools import reduce
from typing import Any, Callable, Dict, Tuple
import uuid

from .transforms import wishlist_add, wishlist_remove

# Статусы коллекции строк корзины
EMPTY = "empty"
LOADING = "loading"
READY = "ready"
ERROR = "error"


@dataclass(frozen=True)
class Event:
    id: str
    ts: str
    name: str
    payload: Dict[str, Any]


Handler = Callable[[Event, dict], dict]


@dataclass(frozen=True)
class EventBus:
    """
    Иммутабельная шина событий.
    Подписчики - чистые функции (Event, State) -> State; других писателей
    у клиентского состояния нет.
    """

    subscribers: Tuple[Tuple[str, Handler], ...] = ()

    def subscribe(self, event_name: str, handler: Handler) -> "EventBus":
        """Возвращает новую шину с добавленным подписчиком"""
        return EventBus(subscribers=self.subscribers + ((event_name, handler),))

    def publish(self, event: Event, state: dict) -> dict:
        """Применяет подходящие обработчики по очереди (fold), возвращает новое состояние"""
        matching = tuple(h for name, h in self.subscribers if name == event.name)
        return reduce(lambda current, handler: handler(event, current), matching, state)


def create_event(name: str, payload: dict | None = None) -> Event:
    """Событие с автоматической меткой времени"""
    return Event(
        id=str(uuid.uuid4()),
        ts=datetime.now().isoformat(),
        name=name,
        payload=dict(payload or {}),
    )


# ============ Обработчики корзины ============


def handle_cart_reset(event: Event, state: dict) -> dict:
    """Гость: локальный список очищается без запроса к серверу"""
    return {**state, "cart_status": EMPTY, "items": (), "error": None, "last_event": event.name}


def handle_cart_loading(event: Event, state: dict) -> dict:
    # items остаются на экране, пока идёт загрузка
    return {**state, "cart_status": LOADING, "last_event": event.name}


def handle_cart_loaded(event: Event, state: dict) -> dict:
    """Ответ сервера целиком заменяет строки корзины"""
    return {
        **state,
        "cart_status": READY,
        "items": tuple(event.payload.get("items", ())),
        "error": None,
        "last_event": event.name,
    }


def handle_cart_failed(event: Event, state: dict) -> dict:
    """Ошибка загрузки не стирает ранее показанные строки"""
    return {
        **state,
        "cart_status": ERROR,
        "error": event.payload.get("error"),
        "last_event": event.name,
    }


def handle_cart_cleared(event: Event, state: dict) -> dict:
    return {**state, "cart_status": READY, "items": (), "error": None, "last_event": event.name}


# ============ Обработчики избранного ============


def handle_wishlist_add(event: Event, state: dict) -> dict:
    entries = wishlist_add(
        state.get("wishlist", ()),
        event.payload["product"],
        event.payload.get("added_at") or event.ts,
    )
    return {**state, "wishlist": entries, "last_event": event.name}


def handle_wishlist_remove(event: Event, state: dict) -> dict:
    entries = wishlist_remove(state.get("wishlist", ()), event.payload.get("product_id"))
    return {**state, "wishlist": entries, "last_event": event.name}


def handle_wishlist_clear(event: Event, state: dict) -> dict:
    return {**state, "wishlist": (), "last_event": event.name}


# ============ Сборка ============


def create_storefront_bus() -> EventBus:
    """Предконфигурированная шина витрины"""
    bus = EventBus()
    bus = bus.subscribe("CART_RESET", handle_cart_reset)
    bus = bus.subscribe("CART_LOADING", handle_cart_loading)
    bus = bus.subscribe("CART_LOADED", handle_cart_loaded)
    bus = bus.subscribe("CART_FAILED", handle_cart_failed)
    bus = bus.subscribe("CART_CLEARED", handle_cart_cleared)
    bus = bus.subscribe("WISHLIST_ADD", handle_wishlist_add)
    bus = bus.subscribe("WISHLIST_REMOVE", handle_wishlist_remove)
    bus = bus.subscribe("WISHLIST_CLEAR", handle_wishlist_clear)
    return bus


def initial_state() -> dict:
    """Начальное состояние клиента"""
    return {
        "cart_status": EMPTY,
        "items": (),
        "error": None,
        "wishlist": (),
        "last_event": None,
    }


def apply_events(bus: EventBus, events: Tuple[Event, ...], state: dict) -> dict:
    """(events, state) -> final_state"""
    return reduce(lambda s, e: bus.publish(e, s), events, state)
