from typing import Optional
from pydantic import BaseModel, Field, field_validator

from poemario.schemas.common import required_text


TAG_NAME_MAX_LENGTH = 50


class TagPayload(BaseModel):
    """Схема создания и обновления тега"""
    nombre: Optional[str] = Field(None, validate_default=True, description="Название тега")

    @field_validator("nombre", mode="before")
    @classmethod
    def check_nombre(cls, value):
        return required_text(
            value,
            TAG_NAME_MAX_LENGTH,
            "El nombre de la etiqueta es requerido",
            f"El nombre de la etiqueta no puede exceder {TAG_NAME_MAX_LENGTH} caracteres",
        )
