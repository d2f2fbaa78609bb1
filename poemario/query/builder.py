"""
Построение запросов для списков: фильтры, поиск, сортировка, пагинация.

Разбор параметров намеренно терпим к ошибкам: некорректные числа
заменяются значениями по умолчанию или зажимаются в допустимый диапазон,
ответ 400 на этом этапе не формируется.
"""
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

from sqlalchemy import Select, func, or_, select

if TYPE_CHECKING:
    from poemario.query.registry import EntitySchema


DEFAULT_LIMIT = 20
MAX_LIMIT = 100
# Верхняя граница для ID и номера страницы: колонки Integer (int4 в PostgreSQL)
MAX_DB_INT = 2 ** 31 - 1
ASC = "asc"
DESC = "desc"

# Имена параметров запроса
PAGE_PARAM = "page"
LIMIT_PARAM = "limit"
SEARCH_PARAM = "search"
DIRECTION_PARAMS = ("orden", "sort")
SORT_FIELD_PARAM = "ordenar_por"


def parse_int(raw: Any) -> Optional[int]:
    """Целое из строки запроса; "5.0" -> 5, мусор -> None"""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    text = str(raw).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return int(number) if math.isfinite(number) else None


def saturate(value: int) -> int:
    return min(value, MAX_DB_INT)


def clamp_page(raw: Any) -> int:
    page = parse_int(raw)
    return saturate(max(1, page)) if page is not None else 1


def clamp_limit(raw: Any, default: int = DEFAULT_LIMIT, maximum: int = MAX_LIMIT) -> int:
    limit = parse_int(raw)
    if limit is None:
        return default
    return max(1, min(maximum, limit))


def parse_id(raw: Any) -> Optional[int]:
    """Положительный ID или None (режим списка); слишком большой ID насыщается"""
    value = parse_int(raw)
    return saturate(value) if value is not None and value > 0 else None


def parse_direction(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    value = str(raw).strip().lower()
    return value if value in (ASC, DESC) else None


@dataclass(frozen=True)
class ListRequest:
    """Нормализованные параметры запроса списка"""
    page: int = 1
    limit: int = DEFAULT_LIMIT
    search: Optional[str] = None
    direction: Optional[str] = None
    sort_by: Optional[str] = None
    filters: Dict[str, int] = field(default_factory=dict)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def applied_filters(self) -> Dict[str, Any]:
        """Фильтры и поиск, реально примененные к запросу (для meta.filters)"""
        applied: Dict[str, Any] = dict(self.filters)
        if self.search:
            applied[SEARCH_PARAM] = self.search
        return applied


@dataclass(frozen=True)
class QueryPlan:
    """Пара независимых запросов: подсчет и страница"""
    count: Select
    page: Select


def parse_list_request(
    params: Mapping[str, Any],
    schema: "EntitySchema",
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int = MAX_LIMIT,
) -> ListRequest:
    search = params.get(SEARCH_PARAM)
    search = str(search).strip() if search is not None else ""

    direction = None
    for name in DIRECTION_PARAMS:
        direction = parse_direction(params.get(name))
        if direction:
            break

    sort_by = params.get(SORT_FIELD_PARAM)
    if sort_by not in schema.sortable:
        sort_by = None

    filters = {}
    for spec in schema.filters:
        value = parse_id(params.get(spec.param))
        if value is not None:
            filters[spec.param] = value

    return ListRequest(
        page=clamp_page(params.get(PAGE_PARAM)),
        limit=clamp_limit(params.get(LIMIT_PARAM), default_limit, max_limit),
        search=search or None,
        direction=direction,
        sort_by=sort_by,
        filters=filters,
    )


def build_conditions(schema: "EntitySchema", request: ListRequest) -> list:
    conditions = []
    if request.search and schema.searchable:
        conditions.append(or_(*[
            column.icontains(request.search, autoescape=True)
            for column in schema.searchable
        ]))
    for spec in schema.filters:
        if spec.param in request.filters:
            conditions.append(spec.clause(request.filters[spec.param]))
    return conditions


def build_order(schema: "EntitySchema", request: ListRequest) -> list:
    column = schema.sortable[request.sort_by or schema.default_sort]
    direction = request.direction or schema.default_direction
    primary_key = schema.model.id
    # Первичный ключ как вторичный ключ сортировки делает порядок детерминированным
    if direction == DESC:
        return [column.desc(), primary_key.desc()]
    return [column.asc(), primary_key.asc()]


def build_query_plan(schema: "EntitySchema", request: ListRequest) -> QueryPlan:
    conditions = build_conditions(schema, request)
    count = select(func.count()).select_from(schema.model).where(*conditions)
    page = (
        schema.list_statement()
        .where(*conditions)
        .order_by(*build_order(schema, request))
        .limit(request.limit)
        .offset(request.offset)
    )
    return QueryPlan(count=count, page=page)
