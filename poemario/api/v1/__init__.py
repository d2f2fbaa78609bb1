from fastapi import APIRouter, Request

from poemario.api.v1.catalog import build_catalog_router
from poemario.query.builder import (
    DIRECTION_PARAMS,
    LIMIT_PARAM,
    PAGE_PARAM,
    SEARCH_PARAM,
    SORT_FIELD_PARAM,
)
from poemario.query.envelope import success_response
from poemario.query.registry import REGISTRY, EntitySchema

# Create main API router
api_router = APIRouter(prefix="/api/v1")


def _describe(schema: EntitySchema, base_url: str, settings) -> dict:
    """Описание ресурса для индекса API"""
    params = {
        PAGE_PARAM: "Número de página (default: 1)",
        LIMIT_PARAM: f"Elementos por página (default: {settings.DEFAULT_PAGE_SIZE}, max: {settings.MAX_PAGE_SIZE})",
    }
    for spec in schema.filters:
        params[spec.param] = f"Filtrar por ID de {spec.param}"
    if schema.searchable:
        params[SEARCH_PARAM] = "Buscar en " + ", ".join(column.key for column in schema.searchable)
    for name in DIRECTION_PARAMS:
        params[name] = f"Dirección de orden (asc|desc, default: {schema.default_direction})"
    params[SORT_FIELD_PARAM] = "Campo de orden: " + ", ".join(schema.sortable)

    url = f"{base_url}/{schema.name}"
    return {
        "url": url,
        "methods": ["GET"],
        "endpoints": {
            f"GET /{schema.name}": f"Lista de {schema.name} (paginado)",
            f"GET /{schema.name}/{{id}}": f"Detalle de {schema.singular}",
        },
        "params": params,
        "examples": [f"{url}?page=1&limit=10", f"{url}/1"],
    }


@api_router.get("")
async def api_index(request: Request):
    """Индекс публичного API: ресурсы, параметры и формат ответа"""
    settings = request.app.state.settings
    base_url = str(request.base_url).rstrip("/") + api_router.prefix
    return success_response(
        {
            "message": f"API RESTful Pública {settings.API_VERSION} - {settings.PROJECT_NAME}",
            "endpoints": {
                name: _describe(schema, base_url, settings)
                for name, schema in REGISTRY.items()
            },
            "response_format": {
                "success": {"success": True, "data": "...", "meta": {"timestamp": "ISO 8601", "version": settings.API_VERSION, "pagination": "..."}},
                "error": {"success": False, "error": {"message": "...", "code": "HTTP status", "details": {}}, "meta": "..."},
            },
        },
        version=request.app.state.api_version,
    )


for schema in REGISTRY.values():
    api_router.include_router(build_catalog_router(schema))
