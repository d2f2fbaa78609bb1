from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from poemario.core.exceptions import InternalError
from poemario.db.database import get_async_session
from poemario.logs import debug_logger
from poemario.query.builder import parse_id, parse_list_request
from poemario.query.envelope import build_pagination, success_response
from poemario.query.registry import EntitySchema
from poemario.services.catalog_service import CatalogService


def database_error(e: SQLAlchemyError) -> InternalError:
    debug_logger.error(f"Ошибка базы данных: {e}")
    return InternalError("Error en la base de datos", {"database_error": str(e)})


async def list_response(
    request: Request,
    db: AsyncSession,
    schema: EntitySchema,
    page_size: Optional[int] = None,
) -> Response:
    """Страница списка с пагинацией и примененными фильтрами"""
    settings = request.app.state.settings
    list_request = parse_list_request(
        request.query_params,
        schema,
        default_limit=page_size or settings.DEFAULT_PAGE_SIZE,
        max_limit=page_size or settings.MAX_PAGE_SIZE,
    )
    try:
        items, total = await CatalogService.get_page(db, schema, list_request)
    except SQLAlchemyError as e:
        raise database_error(e)

    return success_response(
        items,
        pagination=build_pagination(total, list_request.page, list_request.limit),
        filters=list_request.applied_filters,
        version=request.app.state.api_version,
    )


async def detail_response(request: Request, db: AsyncSession, schema: EntitySchema, item_id: int) -> Response:
    try:
        item = await CatalogService.get_detail(db, schema, item_id)
    except SQLAlchemyError as e:
        raise database_error(e)
    return success_response(item, version=request.app.state.api_version)


def build_catalog_router(schema: EntitySchema) -> APIRouter:
    """Роутер только для чтения: GET списка и GET по ID"""
    router = APIRouter(
        prefix=f"/{schema.name}",
        tags=[schema.name],
    )

    @router.get("")
    async def list_items(
        request: Request,
        db: AsyncSession = Depends(get_async_session),
    ):
        return await list_response(request, db, schema)

    @router.get("/{item_id}")
    async def get_item(
        item_id: str,
        request: Request,
        db: AsyncSession = Depends(get_async_session),
    ):
        # Нечисловой или неположительный ID означает режим списка
        parsed_id = parse_id(item_id)
        if parsed_id is None:
            return await list_response(request, db, schema)
        return await detail_response(request, db, schema, parsed_id)

    @router.options("")
    @router.options("/{item_id}")
    async def preflight():
        return Response(status_code=status.HTTP_200_OK)

    return router
