"""
SQL-выражения для чтения сущностей.

Все запросы возвращают плоские строки с префиксованными колонками
(``autor_nombre``, ``categoria_color``, ``etiqueta_id``), которые затем
собираются в JSON модулем ``poemario.query.projector``.
"""
from typing import Sequence

from sqlalchemy import Select, func, select

from poemario.models import Author, Category, Poem, Tag, poem_tags


def _author_columns(with_biography: bool = True) -> list:
    columns = [Author.id.label("autor_id"), Author.nombre.label("autor_nombre")]
    if with_biography:
        columns.append(Author.biografia.label("autor_biografia"))
    return columns


def _category_columns(with_description: bool = True) -> list:
    columns = [
        Category.id.label("categoria_id"),
        Category.nombre.label("categoria_nombre"),
        Category.icono.label("categoria_icono"),
        Category.color.label("categoria_color"),
    ]
    if with_description:
        columns.append(Category.descripcion.label("categoria_descripcion"))
    return columns


def _summary_columns() -> list:
    return [
        Poem.id,
        Poem.titulo,
        Poem.icono,
        Poem.extracto,
        Poem.tiempo_lectura,
        Poem.fecha_creacion,
    ]


def poem_columns() -> list:
    return [
        Poem.id,
        Poem.titulo,
        Poem.icono,
        Poem.extracto,
        Poem.contenido,
        Poem.tiempo_lectura,
        Poem.fecha_creacion,
        Poem.fecha_actualizacion,
        *_author_columns(),
        *_category_columns(),
    ]


# Poems

def poem_list_statement() -> Select:
    """Стихотворения с автором и категорией; теги догружаются отдельным запросом"""
    return (
        select(*poem_columns())
        .select_from(Poem)
        .outerjoin(Author, Poem.autor_id == Author.id)
        .outerjoin(Category, Poem.categoria_id == Category.id)
    )


def poem_detail_statement(poem_id: int) -> Select:
    """Одно стихотворение, по строке на каждый тег (LEFT JOIN)"""
    return (
        select(
            *poem_columns(),
            Tag.id.label("etiqueta_id"),
            Tag.nombre.label("etiqueta_nombre"),
        )
        .select_from(Poem)
        .outerjoin(Author, Poem.autor_id == Author.id)
        .outerjoin(Category, Poem.categoria_id == Category.id)
        .outerjoin(poem_tags, poem_tags.c.poema_id == Poem.id)
        .outerjoin(Tag, poem_tags.c.etiqueta_id == Tag.id)
        .where(Poem.id == poem_id)
        .order_by(Tag.nombre, Tag.id)
    )


def poem_tags_statement(poem_ids: Sequence[int]) -> Select:
    """Теги для набора стихотворений одним запросом"""
    return (
        select(poem_tags.c.poema_id, Tag.id, Tag.nombre)
        .select_from(poem_tags)
        .join(Tag, poem_tags.c.etiqueta_id == Tag.id)
        .where(poem_tags.c.poema_id.in_(list(poem_ids)))
        .order_by(Tag.nombre, Tag.id)
    )


# Authors

def _author_total():
    return (
        select(func.count(Poem.id))
        .where(Poem.autor_id == Author.id)
        .correlate(Author)
        .scalar_subquery()
        .label("total_poemas")
    )


def author_list_statement() -> Select:
    return select(
        Author.id,
        Author.nombre,
        Author.biografia,
        Author.fecha_creacion,
        Author.fecha_actualizacion,
        _author_total(),
    ).select_from(Author)


def author_detail_statement(author_id: int) -> Select:
    return author_list_statement().where(Author.id == author_id)


def author_poems_statement(author_id: int) -> Select:
    """Стихотворения автора с краткой категорией"""
    return (
        select(*_summary_columns(), *_category_columns(with_description=False))
        .select_from(Poem)
        .outerjoin(Category, Poem.categoria_id == Category.id)
        .where(Poem.autor_id == author_id)
        .order_by(Poem.fecha_creacion.desc(), Poem.id.desc())
    )


def author_dependents_statement(author_id: int) -> Select:
    return select(func.count()).select_from(Poem).where(Poem.autor_id == author_id)


# Categories

def _category_total():
    return (
        select(func.count(Poem.id))
        .where(Poem.categoria_id == Category.id)
        .correlate(Category)
        .scalar_subquery()
        .label("total_poemas")
    )


def category_list_statement() -> Select:
    return select(
        Category.id,
        Category.nombre,
        Category.icono,
        Category.color,
        Category.descripcion,
        Category.fecha_creacion,
        Category.fecha_actualizacion,
        _category_total(),
    ).select_from(Category)


def category_detail_statement(category_id: int) -> Select:
    return category_list_statement().where(Category.id == category_id)


def category_poems_statement(category_id: int) -> Select:
    """Стихотворения категории с кратким автором"""
    return (
        select(*_summary_columns(), *_author_columns(with_biography=False))
        .select_from(Poem)
        .outerjoin(Author, Poem.autor_id == Author.id)
        .where(Poem.categoria_id == category_id)
        .order_by(Poem.fecha_creacion.desc(), Poem.id.desc())
    )


def category_dependents_statement(category_id: int) -> Select:
    return select(func.count()).select_from(Poem).where(Poem.categoria_id == category_id)


# Tags

def _tag_total():
    return (
        select(func.count())
        .select_from(poem_tags)
        .where(poem_tags.c.etiqueta_id == Tag.id)
        .correlate(Tag)
        .scalar_subquery()
        .label("total_poemas")
    )


def tag_list_statement() -> Select:
    return select(Tag.id, Tag.nombre, Tag.fecha_creacion, _tag_total()).select_from(Tag)


def tag_detail_statement(tag_id: int) -> Select:
    return tag_list_statement().where(Tag.id == tag_id)


def tag_poems_statement(tag_id: int) -> Select:
    """Стихотворения с тегом, с кратким автором и категорией"""
    return (
        select(
            *_summary_columns(),
            *_author_columns(with_biography=False),
            *_category_columns(with_description=False),
        )
        .select_from(Poem)
        .join(poem_tags, poem_tags.c.poema_id == Poem.id)
        .outerjoin(Author, Poem.autor_id == Author.id)
        .outerjoin(Category, Poem.categoria_id == Category.id)
        .where(poem_tags.c.etiqueta_id == tag_id)
        .order_by(Poem.fecha_creacion.desc(), Poem.id.desc())
    )


def tag_dependents_statement(tag_id: int) -> Select:
    return select(func.count()).select_from(poem_tags).where(poem_tags.c.etiqueta_id == tag_id)
