"""Общие проверки полей для схем записи."""
import re
from typing import Any, Optional

from pydantic_core import PydanticCustomError

from poemario.query.builder import MAX_DB_INT, parse_int


HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


def required_text(value: Any, max_length: int, required_msg: str, length_msg: str) -> str:
    """Обязательная строка: обрезка пробелов, проверка пустоты и длины"""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise PydanticCustomError("required", required_msg)
    if not isinstance(value, str):
        raise PydanticCustomError("string_type", required_msg)
    value = value.strip()
    if len(value) > max_length:
        raise PydanticCustomError("too_long", length_msg)
    return value


def optional_text(value: Any) -> Optional[str]:
    """Необязательная строка; пустое значение хранится как NULL"""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def required_id(value: Any, message: str) -> int:
    if isinstance(value, bool):
        raise PydanticCustomError("numeric", message)
    number = parse_int(value)
    if number is None:
        raise PydanticCustomError("numeric", message)
    # ID вне диапазона колонки не существует: проверка ссылки дает "no existe"
    return max(0, min(number, MAX_DB_INT))
