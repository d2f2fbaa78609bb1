from typing import TYPE_CHECKING, Any, Dict, Optional
from pydantic import BaseModel
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from poemario.core.exceptions import ConflictError, NotFoundError
from poemario.logs import debug_logger, log_function
from poemario.services.catalog_service import CatalogService

if TYPE_CHECKING:
    from poemario.query.registry import EntitySchema


class EntityWriter:
    """Создание, обновление и удаление справочных сущностей (автор, категория, тег)"""

    @staticmethod
    def _values(schema: "EntitySchema", payload: BaseModel, partial: bool = False) -> Dict[str, Any]:
        return payload.model_dump(exclude_unset=partial)

    @staticmethod
    async def _get_or_404(db: AsyncSession, schema: "EntitySchema", item_id: int):
        item = await db.get(schema.model, item_id)
        if item is None:
            raise NotFoundError(schema.not_found)
        return item

    @staticmethod
    async def _ensure_unique(
        db: AsyncSession,
        schema: "EntitySchema",
        payload: BaseModel,
        exclude_id: Optional[int] = None
    ) -> None:
        """Точное (регистрозависимое) совпадение имени; при обновлении сама запись не учитывается"""
        if not schema.unique_field:
            return
        column = getattr(schema.model, schema.unique_field)
        query = select(schema.model.id).where(column == getattr(payload, schema.unique_field))
        if exclude_id is not None:
            query = query.where(schema.model.id != exclude_id)
        result = await db.execute(query)
        if result.first() is not None:
            raise ConflictError(schema.duplicate_message)

    @staticmethod
    async def _commit(db: AsyncSession, schema: "EntitySchema") -> None:
        try:
            await db.commit()
        except IntegrityError as e:
            # Гонка двух запросов с одинаковым именем: уникальный индекс срабатывает при commit
            await db.rollback()
            raise ConflictError(schema.duplicate_message, {"database_error": str(e.orig)})

    @classmethod
    @log_function()
    async def create(
        cls,
        db: AsyncSession,
        schema: "EntitySchema",
        payload: BaseModel
    ) -> Dict[str, Any]:
        await cls._ensure_unique(db, schema, payload)

        item = schema.model(**cls._values(schema, payload))
        db.add(item)
        await cls._commit(db, schema)

        debug_logger.info(f"Создан {schema.singular}: ID {item.id}")
        return await CatalogService.get_detail(db, schema, item.id)

    @classmethod
    @log_function()
    async def update(
        cls,
        db: AsyncSession,
        schema: "EntitySchema",
        item_id: int,
        payload: BaseModel
    ) -> Dict[str, Any]:
        item = await cls._get_or_404(db, schema, item_id)
        await cls._ensure_unique(db, schema, payload, exclude_id=item_id)

        for name, value in cls._values(schema, payload, partial=True).items():
            setattr(item, name, value)
        await cls._commit(db, schema)

        debug_logger.info(f"Обновлен {schema.singular}: ID {item_id}")
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

        if schema.dependents is not None:
            result = await db.execute(schema.dependents(item_id))
            total = int(result.scalar() or 0)
            if total > 0:
                raise ConflictError(schema.dependents_message, {"total_poemas": total})

        await db.execute(delete(schema.model).where(schema.model.id == item_id))
        await db.commit()
        debug_logger.info(f"Удален {schema.singular}: ID {item_id}")
