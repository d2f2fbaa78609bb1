from fastapi import APIRouter

from poemario.api.admin.crud import build_admin_router
from poemario.query.registry import REGISTRY

admin_router = APIRouter(prefix="/admin/api")

for schema in REGISTRY.values():
    admin_router.include_router(build_admin_router(schema))
