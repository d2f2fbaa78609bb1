"""
Проекция плоских строк результата в вложенные JSON-сущности.

Строки приходят как mapping с префиксованными колонками
(``autor_id``, ``autor_nombre``, ...). Функции ниже собирают из них
объекты автора, категории и тегов, приводят числа к int и даты к ISO-8601.
"""
from collections import OrderedDict
from datetime import date, datetime
from typing import Any, Callable, Dict, Hashable, Iterable, List, Mapping, Optional, Sequence, Tuple


Row = Mapping[str, Any]

AUTHOR_FIELDS = ("nombre", "biografia")
AUTHOR_REF_FIELDS = ("nombre",)
CATEGORY_FIELDS = ("nombre", "icono", "color", "descripcion")
CATEGORY_REF_FIELDS = ("nombre", "icono", "color")
TAG_FIELDS = ("nombre",)


def to_int(value: Any, default: int = 0) -> int:
    """Числа из драйвера могут прийти строкой или Decimal"""
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def iso_date(value: Any) -> Optional[str]:
    if not value:
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    text = str(value)
    try:
        return datetime.fromisoformat(text).isoformat()
    except ValueError:
        return text


def split_aggregated(value: Optional[str], delimiter: str = ",") -> List[str]:
    """
    Разбор строки, склеенной в SQL (GROUP_CONCAT / string_agg).

    Пустая строка или None дают пустой список, а не [""].
    """
    if not value:
        return []
    return [part.strip() for part in str(value).split(delimiter) if part.strip()]


def group_by_key(rows: Iterable[Row], key: str) -> Dict[Hashable, List[Row]]:
    """Группировка дочерних строк по внешнему ключу с сохранением порядка"""
    grouped: Dict[Hashable, List[Row]] = OrderedDict()
    for row in rows:
        grouped.setdefault(row[key], []).append(row)
    return grouped


def nest(row: Row, prefix: str, fields: Sequence[str]) -> Optional[Dict[str, Any]]:
    """Вложенный объект из колонок ``{prefix}_id``, ``{prefix}_{field}``"""
    related_id = row.get(f"{prefix}_id")
    if related_id is None:
        return None
    nested = {"id": to_int(related_id)}
    for name in fields:
        nested[name] = row.get(f"{prefix}_{name}")
    return nested


def collapse_joined(
    rows: Iterable[Row],
    child_prefix: str,
    child_fields: Sequence[str],
    key: str = "id",
) -> List[Tuple[Row, List[Dict[str, Any]]]]:
    """
    Свертка строк LEFT JOIN: одна сущность на уникальный первичный ключ.

    Колонки дочерней сущности собираются в список, пустая сторона
    внешнего соединения (все NULL) отбрасывается, повторы по id не дублируются.
    """
    collapsed: Dict[Hashable, Tuple[Row, List[Dict[str, Any]]]] = OrderedDict()
    for row in rows:
        _, children = collapsed.setdefault(row[key], (row, []))
        child = nest(row, child_prefix, child_fields)
        if child is not None and all(existing["id"] != child["id"] for existing in children):
            children.append(child)
    return list(collapsed.values())


def _dates(row: Row) -> Dict[str, Optional[str]]:
    return {
        "creacion": iso_date(row.get("fecha_creacion")),
        "actualizacion": iso_date(row.get("fecha_actualizacion")),
    }


def project_tag_ref(row: Row) -> Dict[str, Any]:
    return {"id": to_int(row["id"]), "nombre": row["nombre"]}


def project_poem(row: Row, tags: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    """Полное представление стихотворения с автором, категорией и тегами"""
    return {
        "id": to_int(row["id"]),
        "titulo": row["titulo"],
        "icono": row.get("icono"),
        "extracto": row.get("extracto"),
        "contenido": row.get("contenido"),
        "tiempo_lectura": to_int(row.get("tiempo_lectura")),
        "autor": nest(row, "autor", AUTHOR_FIELDS),
        "categoria": nest(row, "categoria", CATEGORY_FIELDS),
        "etiquetas": list(tags or []),
        "fechas": _dates(row),
    }


def project_poem_summary(row: Row, with_author: bool = False, with_category: bool = False) -> Dict[str, Any]:
    """Краткое представление для обратных коллекций (без текста)"""
    summary = {
        "id": to_int(row["id"]),
        "titulo": row["titulo"],
        "icono": row.get("icono"),
        "extracto": row.get("extracto"),
        "tiempo_lectura": to_int(row.get("tiempo_lectura")),
        "fecha_creacion": iso_date(row.get("fecha_creacion")),
    }
    if with_author:
        summary["autor"] = nest(row, "autor", AUTHOR_REF_FIELDS)
    if with_category:
        summary["categoria"] = nest(row, "categoria", CATEGORY_REF_FIELDS)
    return summary


def project_author(row: Row) -> Dict[str, Any]:
    return {
        "id": to_int(row["id"]),
        "nombre": row["nombre"],
        "biografia": row.get("biografia"),
        "total_poemas": to_int(row.get("total_poemas")),
        "fechas": _dates(row),
    }


def project_category(row: Row) -> Dict[str, Any]:
    return {
        "id": to_int(row["id"]),
        "nombre": row["nombre"],
        "icono": row.get("icono"),
        "color": row.get("color"),
        "descripcion": row.get("descripcion"),
        "total_poemas": to_int(row.get("total_poemas")),
        "fechas": _dates(row),
    }


def project_tag(row: Row) -> Dict[str, Any]:
    return {
        "id": to_int(row["id"]),
        "nombre": row["nombre"],
        "total_poemas": to_int(row.get("total_poemas")),
        "fecha_creacion": iso_date(row.get("fecha_creacion")),
    }


def project_poem_detail(rows: Sequence[Row]) -> Optional[Dict[str, Any]]:
    """Одно стихотворение из строк LEFT JOIN с тегами"""
    collapsed = collapse_joined(rows, "etiqueta", TAG_FIELDS)
    if not collapsed:
        return None
    row, tags = collapsed[0]
    return project_poem(row, tags)


def first_row(project: Callable[[Row], Dict[str, Any]]) -> Callable[[Sequence[Row]], Optional[Dict[str, Any]]]:
    """Адаптер проекции одной строки к проекции detail-запроса"""
    def project_rows(rows: Sequence[Row]) -> Optional[Dict[str, Any]]:
        return project(rows[0]) if rows else None
    return project_rows
