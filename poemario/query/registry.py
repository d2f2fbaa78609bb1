"""
Реестр описаний сущностей.

Каждая сущность описывается одним :class:`EntitySchema`: таблица, поля
поиска, белый список сортировки, фильтры, запросы списка и детали,
проекции, обратные связи и класс записи. Публичный и админский роутеры
строятся по этим описаниям, без отдельного кода на каждую сущность.
"""
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Type

from pydantic import BaseModel
from sqlalchemy import Select, select

from poemario.models import Author, Category, Poem, Tag, poem_tags
from poemario.query import projector, statements
from poemario.query.builder import ASC, DESC
from poemario.schemas.author import AuthorPayload
from poemario.schemas.category import CategoryPayload
from poemario.schemas.poem import PoemPayload
from poemario.schemas.tag import TagPayload
from poemario.services.entity_writer import EntityWriter
from poemario.services.poem_writer import PoemWriter


@dataclass(frozen=True)
class FilterSpec:
    """Фильтр списка по числовому параметру запроса"""
    param: str
    clause: Callable[[int], Any]


def equals(param: str, column) -> FilterSpec:
    return FilterSpec(param, lambda value: column == value)


def member_of(param: str, parent_key, link_parent, link_child) -> FilterSpec:
    """Фильтр EXISTS по таблице связи many-to-many"""
    def clause(value: int):
        return (
            select(link_parent)
            .where(link_parent == parent_key, link_child == value)
            .exists()
        )
    return FilterSpec(param, clause)


@dataclass(frozen=True)
class ChildRelation:
    """Дочерняя коллекция, догружаемая одним запросом на страницу"""
    name: str
    statement: Callable[[Sequence[int]], Select]
    key: str
    project: Callable[[Any], Dict[str, Any]]


@dataclass(frozen=True)
class ReverseRelation:
    """Обратная коллекция в детальном представлении"""
    name: str
    statement: Callable[[int], Select]
    project: Callable[[Any], Dict[str, Any]]


@dataclass(frozen=True)
class EntitySchema:
    name: str
    singular: str
    not_found: str
    model: Any
    list_statement: Callable[[], Select]
    project: Callable[..., Dict[str, Any]]
    detail_statement: Callable[[int], Select]
    project_detail: Callable[[Sequence[Any]], Optional[Dict[str, Any]]]
    payload_model: Type[BaseModel]
    searchable: Tuple[Any, ...] = ()
    sortable: Dict[str, Any] = field(default_factory=dict)
    default_sort: str = "nombre"
    default_direction: str = ASC
    filters: Tuple[FilterSpec, ...] = ()
    children: Tuple[ChildRelation, ...] = ()
    reverse: Optional[ReverseRelation] = None
    unique_field: Optional[str] = "nombre"
    duplicate_message: str = "Ya existe un registro con ese nombre"
    dependents: Optional[Callable[[int], Select]] = None
    dependents_message: str = ""
    writer: Type[EntityWriter] = EntityWriter


POEMS = EntitySchema(
    name="poemas",
    singular="poema",
    not_found="Poema no encontrado",
    model=Poem,
    list_statement=statements.poem_list_statement,
    project=projector.project_poem,
    detail_statement=statements.poem_detail_statement,
    project_detail=projector.project_poem_detail,
    payload_model=PoemPayload,
    searchable=(Poem.titulo, Poem.contenido, Poem.extracto),
    sortable={
        "fecha_creacion": Poem.fecha_creacion,
        "titulo": Poem.titulo,
        "tiempo_lectura": Poem.tiempo_lectura,
        "id": Poem.id,
    },
    default_sort="fecha_creacion",
    default_direction=DESC,
    filters=(
        equals("categoria", Poem.categoria_id),
        equals("autor", Poem.autor_id),
        member_of("etiqueta", Poem.id, poem_tags.c.poema_id, poem_tags.c.etiqueta_id),
    ),
    children=(
        ChildRelation(
            name="etiquetas",
            statement=statements.poem_tags_statement,
            key="poema_id",
            project=projector.project_tag_ref,
        ),
    ),
    unique_field=None,
    writer=PoemWriter,
)

AUTHORS = EntitySchema(
    name="autores",
    singular="autor",
    not_found="Autor no encontrado",
    model=Author,
    list_statement=statements.author_list_statement,
    project=projector.project_author,
    detail_statement=statements.author_detail_statement,
    project_detail=projector.first_row(projector.project_author),
    payload_model=AuthorPayload,
    searchable=(Author.nombre, Author.biografia),
    sortable={"nombre": Author.nombre, "fecha_creacion": Author.fecha_creacion, "id": Author.id},
    reverse=ReverseRelation(
        name="poemas",
        statement=statements.author_poems_statement,
        project=partial(projector.project_poem_summary, with_category=True),
    ),
    duplicate_message="Ya existe un autor con ese nombre",
    dependents=statements.author_dependents_statement,
    dependents_message="No se puede eliminar el autor porque tiene poemas asociados",
)

CATEGORIES = EntitySchema(
    name="categorias",
    singular="categoría",
    not_found="Categoría no encontrada",
    model=Category,
    list_statement=statements.category_list_statement,
    project=projector.project_category,
    detail_statement=statements.category_detail_statement,
    project_detail=projector.first_row(projector.project_category),
    payload_model=CategoryPayload,
    searchable=(Category.nombre, Category.descripcion),
    sortable={"nombre": Category.nombre, "fecha_creacion": Category.fecha_creacion, "id": Category.id},
    reverse=ReverseRelation(
        name="poemas",
        statement=statements.category_poems_statement,
        project=partial(projector.project_poem_summary, with_author=True),
    ),
    duplicate_message="Ya existe una categoría con ese nombre",
    dependents=statements.category_dependents_statement,
    dependents_message="No se puede eliminar la categoría porque tiene poemas asociados",
)

TAGS = EntitySchema(
    name="etiquetas",
    singular="etiqueta",
    not_found="Etiqueta no encontrada",
    model=Tag,
    list_statement=statements.tag_list_statement,
    project=projector.project_tag,
    detail_statement=statements.tag_detail_statement,
    project_detail=projector.first_row(projector.project_tag),
    payload_model=TagPayload,
    searchable=(Tag.nombre,),
    sortable={"nombre": Tag.nombre, "fecha_creacion": Tag.fecha_creacion, "id": Tag.id},
    reverse=ReverseRelation(
        name="poemas",
        statement=statements.tag_poems_statement,
        project=partial(projector.project_poem_summary, with_author=True, with_category=True),
    ),
    duplicate_message="Ya existe una etiqueta con ese nombre",
    dependents=statements.tag_dependents_statement,
    dependents_message="No se puede eliminar la etiqueta porque está asignada a poemas",
)

# Порядок совпадает с порядком маршрутов в индексе API
REGISTRY: Dict[str, EntitySchema] = {
    schema.name: schema for schema in (POEMS, AUTHORS, CATEGORIES, TAGS)
}


def get_schema(name: str) -> EntitySchema:
    return REGISTRY[name]
