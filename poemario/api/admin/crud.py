from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from poemario.api.v1.catalog import database_error, detail_response, list_response
from poemario.core.exceptions import ValidationError
from poemario.db.database import get_async_session
from poemario.query.builder import parse_id
from poemario.query.envelope import success_response
from poemario.query.registry import EntitySchema


def _require_id(item_id: str) -> int:
    parsed_id = parse_id(item_id)
    if parsed_id is None:
        raise ValidationError("ID requerido y debe ser numérico")
    return parsed_id


def build_admin_router(schema: EntitySchema) -> APIRouter:
    """CRUD-роутер админ-панели для одной сущности"""
    router = APIRouter(
        prefix=f"/{schema.name}",
        tags=[f"admin:{schema.name}"],
    )
    payload_model = schema.payload_model
    writer = schema.writer

    @router.get("")
    async def list_items(
        request: Request,
        db: AsyncSession = Depends(get_async_session),
    ):
        return await list_response(request, db, schema, page_size=request.app.state.settings.ADMIN_PAGE_SIZE)

    @router.get("/{item_id}")
    async def get_item(
        item_id: str,
        request: Request,
        db: AsyncSession = Depends(get_async_session),
    ):
        parsed_id = parse_id(item_id)
        if parsed_id is None:
            return await list_response(request, db, schema, page_size=request.app.state.settings.ADMIN_PAGE_SIZE)
        return await detail_response(request, db, schema, parsed_id)

    @router.post("", status_code=status.HTTP_201_CREATED)
    async def create_item(
        payload: payload_model,
        request: Request,
        db: AsyncSession = Depends(get_async_session),
    ):
        """Создание записи; ответ содержит детальное представление"""
        try:
            item = await writer.create(db, schema, payload)
        except SQLAlchemyError as e:
            raise database_error(e)
        return success_response(
            item,
            status_code=status.HTTP_201_CREATED,
            version=request.app.state.api_version,
        )

    @router.put("/{item_id}")
    async def update_item(
        item_id: str,
        payload: payload_model,
        request: Request,
        db: AsyncSession = Depends(get_async_session),
    ):
        parsed_id = _require_id(item_id)
        try:
            item = await writer.update(db, schema, parsed_id, payload)
        except SQLAlchemyError as e:
            raise database_error(e)
        return success_response(item, version=request.app.state.api_version)

    @router.delete("/{item_id}")
    async def delete_item(
        item_id: str,
        request: Request,
        db: AsyncSession = Depends(get_async_session),
    ):
        parsed_id = _require_id(item_id)
        try:
            await writer.delete(db, schema, parsed_id)
        except SQLAlchemyError as e:
            raise database_error(e)
        return success_response(None, version=request.app.state.api_version)

    return router
