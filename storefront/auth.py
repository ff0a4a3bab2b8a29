import logging
from typing import Awaitable, Callable, List, Optional

from .domain import User

log = logging.getLogger(__name__)

PendingAction = Callable[[], Awaitable[None]]
AuthListener = Callable[[bool], Awaitable[None]]


class AuthSession:
    """
    Сессия пользователя и отложенное действие.

    Действие, которое требует входа (например, добавление в корзину),
    сохраняется через set_pending_action и выполняется ровно один раз сразу
    после успешного login. Закрытие окна входа без входа его отбрасывает.
    """

    def __init__(self, user: Optional[User] = None):
        self._user = user
        self._pending: Optional[PendingAction] = None
        self._listeners: List[AuthListener] = []
        self.is_login_modal_open = False

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def has_pending_action(self) -> bool:
        return self._pending is not None

    def subscribe(self, listener: AuthListener) -> None:
        """listener(is_authenticated) вызывается при каждой смене состояния входа"""
        self._listeners.append(listener)

    def set_pending_action(self, action: Optional[PendingAction]) -> None:
        self._pending = action

    def open_login_modal(self) -> None:
        self.is_login_modal_open = True

    def close_login_modal(self) -> None:
        """Вход отменён: отложенное действие больше не нужно"""
        self.is_login_modal_open = False
        if self._pending is not None:
            log.info("Login abandoned, pending action discarded")
        self._pending = None

    async def _notify(self) -> None:
        for listener in tuple(self._listeners):
            await listener(self.is_authenticated)

    async def login(self, user: User) -> None:
        self._user = user
        self.is_login_modal_open = False
        await self._notify()

        # очищаем до запуска, чтобы действие не выполнилось дважды
        action, self._pending = self._pending, None
        if action is None:
            return
        log.info("Executing pending action after login")
        try:
            await action()
        except Exception:
            log.exception("Pending action failed")

    async def logout(self) -> None:
        self._user = None
        self._pending = None
        await self._notify()
