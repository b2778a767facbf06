# File: page_scout/utils.py
"""page_scout.utils: Вспомогательные функции для разбора значений структурированных данных."""

from __future__ import annotations

import json
from typing import Any, List, Optional, Sequence

from page_scout.logger import logger

__all__: Sequence[str] = (
    "try_parse_json",
    "is_blank",
    "value_array",
    "single_value",
    "to_bool",
)


def try_parse_json(text: str) -> Any:
    """Разбирает JSON и возвращает None вместо исключения при ошибке синтаксиса."""
    try:
        return json.loads(text)
    except (ValueError, TypeError) as exc:
        logger.debug("Malformed JSON skipped: %s", exc)
        return None


def is_blank(value: Any) -> bool:
    """Пустым считается только None и пустая строка."""
    return value is None or value == ""


def value_array(obj: Any, name: str) -> Optional[List[Any]]:
    """Возвращает значение свойства как список; одиночное значение оборачивается."""
    if not isinstance(obj, dict):
        return None
    value = obj.get(name)
    if is_blank(value):
        return None
    return value if isinstance(value, list) else [value]


def single_value(obj: Any, name: str) -> Any:
    """Первое значение свойства или None."""
    values = value_array(obj, name)
    value = values[0] if values else None
    return None if is_blank(value) else value


def to_bool(value: Any, default: bool) -> bool:
    """Приводит bool или строку "true"/"false" (без учёта регистра) к bool."""
    if is_blank(value):
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.lower()
        if lowered == "false":
            return False
        if lowered == "true":
            return True
    return default
