from dataclasses import dataclass
from typing import List, Protocol, Tuple

SUCCESS = "success"
ERROR = "error"


@dataclass(frozen=True)
class Toast:
    level: str
    message: str


class Notifier(Protocol):
    """Всплывающие уведомления: fire-and-forget, без ожидания и повторов"""

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class ToastLog:
    """Notifier в памяти: UI выгружает его в st.toast, тесты читают напрямую"""

    def __init__(self) -> None:
        self._toasts: List[Toast] = []

    def success(self, message: str) -> None:
        self._toasts.append(Toast(SUCCESS, message))

    def error(self, message: str) -> None:
        self._toasts.append(Toast(ERROR, message))

    @property
    def toasts(self) -> Tuple[Toast, ...]:
        return tuple(self._toasts)

    def drain(self) -> Tuple[Toast, ...]:
        """Забирает накопленные уведомления и очищает журнал"""
        pending, self._toasts = tuple(self._toasts), []
        return pending
