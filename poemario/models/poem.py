from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from poemario.db.base import Base
from poemario.models.tag import poem_tags


DEFAULT_READING_TIME = 2


class Poem(Base):
    """Модель стихотворения"""

    __tablename__ = "poemas"

    id = Column(Integer, primary_key=True, index=True)
    titulo = Column(String(200), nullable=False)
    autor_id = Column(Integer, ForeignKey("autores.id"), nullable=False, index=True)
    categoria_id = Column(Integer, ForeignKey("categorias.id"), nullable=False, index=True)
    icono = Column(String(50), nullable=True)
    extracto = Column(Text, nullable=True)
    contenido = Column(Text, nullable=False)
    tiempo_lectura = Column(Integer, default=DEFAULT_READING_TIME)  # минуты
    fecha_creacion = Column(DateTime, default=datetime.now, index=True)
    fecha_actualizacion = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    # Отношения many-to-one с автором и категорией
    author = relationship("Author", back_populates="poems")
    category = relationship("Category", back_populates="poems")

    # Отношение many-to-many с тегами
    tags = relationship("Tag", secondary=poem_tags, back_populates="poems")
