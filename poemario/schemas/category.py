from typing import Optional
from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from poemario.schemas.common import HEX_COLOR, optional_text, required_text


CATEGORY_NAME_MAX_LENGTH = 50


class CategoryPayload(BaseModel):
    """Схема создания и обновления категории"""
    nombre: Optional[str] = Field(None, validate_default=True, description="Название категории")
    icono: Optional[str] = Field(None, max_length=50, description="Иконка (emoji)")
    color: Optional[str] = Field(None, description="Цвет категории (HEX формат #RRGGBB)")
    descripcion: Optional[str] = Field(None, description="Описание")

    @field_validator("nombre", mode="before")
    @classmethod
    def check_nombre(cls, value):
        return required_text(
            value,
            CATEGORY_NAME_MAX_LENGTH,
            "El nombre de la categoría es requerido",
            f"El nombre de la categoría no puede exceder {CATEGORY_NAME_MAX_LENGTH} caracteres",
        )

    @field_validator("icono", "descripcion", mode="before")
    @classmethod
    def clean_text(cls, value):
        return optional_text(value)

    @field_validator("color", mode="before")
    @classmethod
    def check_color(cls, value):
        # Пустая строка сбрасывает цвет
        value = optional_text(value)
        if value is not None and not HEX_COLOR.match(value):
            raise PydanticCustomError("color", "El color debe estar en formato hexadecimal (#RRGGBB)")
        return value
