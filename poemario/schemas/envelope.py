from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class Pagination(BaseModel):
    """Метаданные постраничного вывода"""
    total_items: int = 0
    total_pages: int = 0
    current_page: int = 1
    items_per_page: int
    has_next_page: bool = False
    has_prev_page: bool = False


class Meta(BaseModel):
    """Блок meta, общий для успешных ответов и ошибок"""
    timestamp: str
    version: str
    pagination: Optional[Pagination] = None
    filters: Optional[Dict[str, Any]] = None


class ErrorBody(BaseModel):
    """Описание ошибки; code совпадает с HTTP-статусом"""
    message: str
    code: int
    details: Dict[str, Any] = Field(default_factory=dict)
