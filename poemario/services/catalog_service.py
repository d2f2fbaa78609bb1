from typing import TYPE_CHECKING, Any, Dict, List, Sequence, Tuple
from sqlalchemy.ext.asyncio import AsyncSession

from poemario.core.exceptions import NotFoundError
from poemario.query.builder import ListRequest, build_query_plan
from poemario.query.projector import group_by_key

if TYPE_CHECKING:
    from poemario.query.registry import EntitySchema


class CatalogService:
    """Чтение сущностей: постраничные списки и детальные представления"""

    @staticmethod
    async def get_page(
        db: AsyncSession,
        schema: "EntitySchema",
        request: ListRequest
    ) -> Tuple[List[Dict[str, Any]], int]:
        """Страница списка и общее количество записей по тем же условиям"""
        plan = build_query_plan(schema, request)

        result = await db.execute(plan.count)
        total = int(result.scalar() or 0)

        result = await db.execute(plan.page)
        rows = result.mappings().all()

        children = await CatalogService._load_children(db, schema, rows)
        items = [
            schema.project(row, *[
                children[child.name].get(row["id"], [])
                for child in schema.children
            ])
            for row in rows
        ]
        return items, total

    @staticmethod
    async def _load_children(
        db: AsyncSession,
        schema: "EntitySchema",
        rows: Sequence[Any]
    ) -> Dict[str, Dict[Any, List[Dict[str, Any]]]]:
        """Один запрос на каждую дочернюю коллекцию для всех строк страницы"""
        children: Dict[str, Dict[Any, List[Dict[str, Any]]]] = {}
        parent_ids = [row["id"] for row in rows]
        for child in schema.children:
            if not parent_ids:
                children[child.name] = {}
                continue
            result = await db.execute(child.statement(parent_ids))
            grouped = group_by_key(result.mappings().all(), child.key)
            children[child.name] = {
                parent_id: [child.project(row) for row in child_rows]
                for parent_id, child_rows in grouped.items()
            }
        return children

    @staticmethod
    async def get_detail(
        db: AsyncSession,
        schema: "EntitySchema",
        item_id: int
    ) -> Dict[str, Any]:
        """Детальное представление; для автора, категории и тега с коллекцией poemas"""
        result = await db.execute(schema.detail_statement(item_id))
        item = schema.project_detail(result.mappings().all())
        if item is None:
            raise NotFoundError(schema.not_found)

        if schema.reverse is not None:
            result = await db.execute(schema.reverse.statement(item_id))
            item[schema.reverse.name] = [
                schema.reverse.project(row) for row in result.mappings().all()
            ]
        return item
