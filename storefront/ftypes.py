# storefront/ftypes.py
# Maybe / Either for values that may be missing or may fail to decode.
# Frozen, tiny API: map, bind, get_or_else.

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, Tuple, Type, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")
L = TypeVar("L")
R = TypeVar("R")


@dataclass(frozen=True)
class Maybe(Generic[T]):
    """
    Значение, которого может не быть (Option).
    Maybe.some(value) / Maybe.nothing(); None внутри считается отсутствием.
    """

    value: Optional[T]

    @staticmethod
    def some(value: T) -> "Maybe[T]":
        return Maybe(value)

    @staticmethod
    def nothing() -> "Maybe[Any]":
        return Maybe(None)

    @staticmethod
    def of_key(mapping: Any, key: str) -> "Maybe[Any]":
        """Безопасное чтение ключа у чего угодно: не dict -> Nothing"""
        if isinstance(mapping, dict):
            return Maybe(mapping.get(key))
        return Maybe.nothing()

    def is_some(self) -> bool:
        return self.value is not None

    def is_none(self) -> bool:
        return self.value is None

    def map(self, fn: Callable[[T], U]) -> "Maybe[U]":
        return Maybe.some(fn(self.value)) if self.is_some() else Maybe.nothing()

    def bind(self, fn: Callable[[T], "Maybe[U]"]) -> "Maybe[U]":
        return fn(self.value) if self.is_some() else Maybe.nothing()

    def get_or_else(self, default: U) -> T | U:
        return self.value if self.is_some() else default

    def __repr__(self) -> str:
        return f"Some({self.value!r})" if self.is_some() else "Nothing"


@dataclass(frozen=True)
class Either(Generic[L, R]):
    """
    Left: ошибка (обычно исключение или dict с описанием), Right: результат.
    Either.attempt(fn, *args) заворачивает вызов, который может бросить.
    """

    is_left: bool
    value: Union[L, R]

    @staticmethod
    def left(value: L) -> "Either[L, Any]":
        return Either(True, value)

    @staticmethod
    def right(value: R) -> "Either[Any, R]":
        return Either(False, value)

    @staticmethod
    def attempt(
        fn: Callable[..., R],
        *args: Any,
        catch: Tuple[Type[BaseException], ...] = (Exception,),
    ) -> "Either[BaseException, R]":
        try:
            return Either.right(fn(*args))
        except catch as exc:  # type: ignore[misc]
            return Either.left(exc)

    @property
    def is_right(self) -> bool:
        return not self.is_left

    def map(self, fn: Callable[[R], U]) -> "Either[L, U]":
        return Either.right(fn(self.value)) if self.is_right else self  # type: ignore[return-value]

    def bind(self, fn: Callable[[R], "Either[L, U]"]) -> "Either[L, U]":
        return fn(self.value) if self.is_right else self  # type: ignore[return-value]

    def or_else(self, fn: Callable[[L], "Either[L, R]"]) -> "Either[L, R]":
        """Вторая попытка только для Left (bind наоборот)"""
        return fn(self.value) if self.is_left else self  # type: ignore[arg-type]

    def get_or_else(self, default: U) -> R | U:
        return self.value if self.is_right else default  # type: ignore[return-value]

    def __repr__(self) -> str:
        return f"Left({self.value!r})" if self.is_left else f"Right({self.value!r})"
