from typing import TYPE_CHECKING, Any, Dict, Iterable
from sqlalchemy import delete, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from poemario.core.exceptions import ValidationError
from poemario.logs import debug_logger, log_function
from poemario.models import Author, Category, Poem, Tag, poem_tags
from poemario.schemas.poem import PoemPayload
from poemario.services.catalog_service import CatalogService
from poemario.services.entity_writer import EntityWriter

if TYPE_CHECKING:
    from poemario.query.registry import EntitySchema


class PoemWriter(EntityWriter):
    """
    Запись стихотворения вместе с тегами в одной транзакции:
    проверка автора и категории, сохранение, замена всех связей с тегами, commit.
    Любая ошибка откатывает транзакцию целиком.
    """

    @staticmethod
    def _values(schema: "EntitySchema", payload: PoemPayload, partial: bool = False) -> Dict[str, Any]:
        return payload.model_dump(exclude={"etiquetas"}, exclude_unset=partial)

    @staticmethod
    async def _check_references(db: AsyncSession, payload: PoemPayload) -> None:
        if await db.get(Author, payload.autor_id) is None:
            raise ValidationError("El autor especificado no existe")
        if await db.get(Category, payload.categoria_id) is None:
            raise ValidationError("La categoría especificada no existe")

    @staticmethod
    async def _replace_tags(db: AsyncSession, poem_id: int, tag_ids: Iterable[int]) -> None:
        """Удаление всех связей и вставка новых; несуществующие теги пропускаются"""
        await db.execute(delete(poem_tags).where(poem_tags.c.poema_id == poem_id))

        tag_ids = list(tag_ids)
        if not tag_ids:
            return
        result = await db.execute(select(Tag.id).where(Tag.id.in_(tag_ids)))
        existing = set(result.scalars().all())
        skipped = [tag_id for tag_id in tag_ids if tag_id not in existing]
        if skipped:
            debug_logger.warning(f"Пропущены несуществующие теги {skipped} для стихотворения {poem_id}")

        links = [{"poema_id": poem_id, "etiqueta_id": tag_id} for tag_id in tag_ids if tag_id in existing]
        if links:
            await db.execute(insert(poem_tags), links)

    @classmethod
    @log_function()
    async def create(
        cls,
        db: AsyncSession,
        schema: "EntitySchema",
        payload: PoemPayload
    ) -> Dict[str, Any]:
        await cls._check_references(db, payload)

        poem = Poem(**cls._values(schema, payload))
        try:
            db.add(poem)
            await db.flush()  # Получаем ID стихотворения
            await cls._replace_tags(db, poem.id, payload.etiquetas)
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            raise

        debug_logger.info(f"Создано стихотворение: ID {poem.id}, теги {payload.etiquetas}")
        return await CatalogService.get_detail(db, schema, poem.id)

    @classmethod
    @log_function()
    async def update(
        cls,
        db: AsyncSession,
        schema: "EntitySchema",
        item_id: int,
        payload: PoemPayload
    ) -> Dict[str, Any]:
        poem = await cls._get_or_404(db, schema, item_id)
        await cls._check_references(db, payload)

        try:
            for name, value in cls._values(schema, payload, partial=True).items():
                setattr(poem, name, value)
            await db.flush()
            await cls._replace_tags(db, item_id, payload.etiquetas)
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            raise

        debug_logger.info(f"Обновлено стихотворение: ID {item_id}, теги {payload.etiquetas}")
        return await CatalogService.get_detail(db, schema, item_id)

    @classmethod
    @log_function()
    async def delete(
        cls,
        db: AsyncSession,
        schema: "EntitySchema",
        item_id: int
    ) -> None:
        await cls._get_or_404(db, schema, item_id)

        try:
            # Связи с тегами удаляются явно, каскада в схеме нет
            await db.execute(delete(poem_tags).where(poem_tags.c.poema_id == item_id))
            await db.execute(delete(Poem).where(Poem.id == item_id))
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            raise

        debug_logger.info(f"Удалено стихотворение: ID {item_id}")
