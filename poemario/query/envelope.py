"""
Единый конверт ответов API.

Успех::

    {"success": true, "data": ..., "meta": {"timestamp", "version", "pagination"?, "filters"?}}

Ошибка::

    {"success": false, "error": {"message", "code", "details"}, "meta": {"timestamp", "version"}}

HTTP-статус ответа с ошибкой всегда равен ``error.code``.
"""
import math
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import status
from fastapi.responses import JSONResponse

from poemario.schemas.envelope import ErrorBody, Meta, Pagination


DEFAULT_VERSION = "v1"


def build_pagination(total_items: int, page: int, limit: int) -> Pagination:
    total_items = int(total_items or 0)
    total_pages = math.ceil(total_items / limit) if limit > 0 else 0
    return Pagination(
        total_items=total_items,
        total_pages=total_pages,
        current_page=page,
        items_per_page=limit,
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
    )


def build_meta(
    version: str = DEFAULT_VERSION,
    pagination: Optional[Pagination] = None,
    filters: Optional[Dict[str, Any]] = None,
) -> Meta:
    return Meta(
        timestamp=datetime.now(timezone.utc).astimezone().isoformat(timespec="seconds"),
        version=version,
        pagination=pagination,
        # Пустой набор фильтров в ответ не попадает
        filters=filters or None,
    )


def success_body(
    data: Any,
    pagination: Optional[Pagination] = None,
    filters: Optional[Dict[str, Any]] = None,
    version: str = DEFAULT_VERSION,
) -> Dict[str, Any]:
    # data отдается как есть (null в полях сохраняется), из meta убираются пустые блоки
    return {
        "success": True,
        "data": data,
        "meta": build_meta(version, pagination, filters).model_dump(exclude_none=True),
    }


def error_body(
    message: str,
    code: int,
    details: Optional[Dict[str, Any]] = None,
    version: str = DEFAULT_VERSION,
) -> Dict[str, Any]:
    return {
        "success": False,
        "error": ErrorBody(message=message, code=code, details=details or {}).model_dump(),
        "meta": build_meta(version).model_dump(exclude_none=True),
    }


def success_response(
    data: Any,
    status_code: int = status.HTTP_200_OK,
    pagination: Optional[Pagination] = None,
    filters: Optional[Dict[str, Any]] = None,
    version: str = DEFAULT_VERSION,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=success_body(data, pagination, filters, version),
    )


def error_response(
    message: str,
    code: int,
    details: Optional[Dict[str, Any]] = None,
    version: str = DEFAULT_VERSION,
) -> JSONResponse:
    return JSONResponse(status_code=code, content=error_body(message, code, details, version))
