import json
import logging
import re
from typing import Any, List, Tuple, TypeVar

from .ftypes import Either

log = logging.getLogger(__name__)

T = TypeVar("T")

# Дюймы в свободном тексте из админки: 15.6" внутри строкового значения.
# Кавычка после цифр экранируется, если за ней не идёт конец JSON-строки
# (запятая, двоеточие, закрывающая скобка или конец ввода).
_INCH_MARK = re.compile(r'(\d+(?:\.\d+)?)"(?!\s*(?:[,:}\]]|$))')

_PARSE_ERRORS = (ValueError, RecursionError)


def _strict_parse(text: str) -> Either:
    return Either.attempt(json.loads, text, catch=_PARSE_ERRORS)


def repair_inch_marks(text: str) -> str:
    """Один проход: 15.6" -> 15.6\\" (только этот известный дефект)"""
    return _INCH_MARK.sub(r'\1\\"', text)


def parse_field(value: Any, fallback: T) -> T:
    """
    Разбирает поле, которое должно быть объектом, но может прийти строкой.

    - None / пустая строка -> fallback
    - dict / list -> как есть
    - прочие не-строки -> fallback
    - строка -> json.loads; при ошибке одна попытка починки кавычек и повтор;
      если и это не удалось, лог с исходной строкой и fallback.
    Никогда не бросает исключений.
    """
    if value is None:
        return fallback
    if isinstance(value, (dict, list)):
        return value  # type: ignore[return-value]
    if not isinstance(value, str) or value == "":
        return fallback

    result = _strict_parse(value).or_else(
        lambda _err: _strict_parse(repair_inch_marks(value))
    )
    if result.is_left:
        log.error("Failed to parse JSON after cleaning: %r (%s)", value, result.value)
        return fallback
    return result.value


# ============ Таблица характеристик ============


def _label_value(entry: Any) -> Tuple[str, Any]:
    if isinstance(entry, dict):
        label = entry.get("label") or entry.get("key") or entry.get("name") or ""
        return str(label), entry.get("value")
    return "", None


def spec_rows(specifications: Any) -> List[Tuple[str, str]]:
    """
    Строки (название, значение) для таблицы технических характеристик.
    Принимает dict или список {label/key, value}; пустые значения пропускаются.
    """
    parsed = parse_field(specifications, {})

    if isinstance(parsed, dict):
        pairs = list(parsed.items())
    elif isinstance(parsed, list):
        pairs = [_label_value(e) for e in parsed]
    else:
        pairs = []

    return [
        (str(label), value if isinstance(value, str) else json.dumps(value, ensure_ascii=False))
        for label, value in pairs
        if label and value not in (None, "", [], {})
    ]
