from typing import Optional
from pydantic import BaseModel, Field, field_validator

from poemario.schemas.common import optional_text, required_text


AUTHOR_NAME_MAX_LENGTH = 100


class AuthorPayload(BaseModel):
    """Схема создания и обновления автора"""
    nombre: Optional[str] = Field(None, validate_default=True, description="Имя автора")
    biografia: Optional[str] = Field(None, description="Биография")

    @field_validator("nombre", mode="before")
    @classmethod
    def check_nombre(cls, value):
        return required_text(
            value,
            AUTHOR_NAME_MAX_LENGTH,
            "El nombre del autor es requerido",
            f"El nombre del autor no puede exceder {AUTHOR_NAME_MAX_LENGTH} caracteres",
        )

    @field_validator("biografia", mode="before")
    @classmethod
    def clean_biografia(cls, value):
        return optional_text(value)
