from typing import Any, List, Optional, Union
from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from poemario.models.poem import DEFAULT_READING_TIME
from poemario.query.builder import MAX_DB_INT, parse_int
from poemario.query.projector import split_aggregated
from poemario.schemas.common import optional_text, required_id, required_text


POEM_TITLE_MAX_LENGTH = 200


class PoemPayload(BaseModel):
    """Схема создания и обновления стихотворения"""
    titulo: Optional[str] = Field(None, validate_default=True, description="Заголовок")
    contenido: Optional[str] = Field(None, validate_default=True, description="Текст стихотворения")
    autor_id: Optional[int] = Field(None, validate_default=True, description="ID автора")
    categoria_id: Optional[int] = Field(None, validate_default=True, description="ID категории")
    icono: Optional[str] = Field(None, max_length=50)
    extracto: Optional[str] = None
    tiempo_lectura: int = Field(DEFAULT_READING_TIME, description="Время чтения в минутах")
    # Список ID или строка "1,3" из формы админ-панели
    etiquetas: List[int] = Field(default_factory=list, description="ID тегов")

    @field_validator("titulo", mode="before")
    @classmethod
    def check_titulo(cls, value):
        return required_text(
            value,
            POEM_TITLE_MAX_LENGTH,
            "El título es requerido",
            f"El título no puede exceder {POEM_TITLE_MAX_LENGTH} caracteres",
        )

    @field_validator("contenido", mode="before")
    @classmethod
    def check_contenido(cls, value):
        if value is None or not str(value).strip():
            raise PydanticCustomError("required", "El contenido es requerido")
        return str(value).strip()

    @field_validator("autor_id", mode="before")
    @classmethod
    def check_autor_id(cls, value):
        return required_id(value, "El ID del autor es requerido y debe ser numérico")

    @field_validator("categoria_id", mode="before")
    @classmethod
    def check_categoria_id(cls, value):
        return required_id(value, "El ID de la categoría es requerido y debe ser numérico")

    @field_validator("icono", "extracto", mode="before")
    @classmethod
    def clean_text(cls, value):
        return optional_text(value)

    @field_validator("tiempo_lectura", mode="before")
    @classmethod
    def check_tiempo_lectura(cls, value):
        if value is None:
            return DEFAULT_READING_TIME
        minutes = None if isinstance(value, bool) else parse_int(value)
        if minutes is None or not 1 <= minutes <= MAX_DB_INT:
            raise PydanticCustomError("reading_time", "El tiempo de lectura debe ser un número mayor a 0")
        return minutes

    @field_validator("etiquetas", mode="before")
    @classmethod
    def parse_etiquetas(cls, value: Union[None, str, List[Any]]):
        if value is None:
            return []
        if isinstance(value, str):
            value = split_aggregated(value)
        if not isinstance(value, (list, tuple)):
            raise PydanticCustomError("list_type", "Las etiquetas deben ser una lista de IDs")

        tag_ids = []
        for item in value:
            tag_id = None if isinstance(item, bool) else parse_int(item)
            # Нечисловые, вне диапазона ID и повторы пропускаются
            if tag_id is not None and 0 < tag_id <= MAX_DB_INT and tag_id not in tag_ids:
                tag_ids.append(tag_id)
        return tag_ids
