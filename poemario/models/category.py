from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.orm import relationship

from poemario.db.base import Base


class Category(Base):
    """Модель категории стихотворений"""

    __tablename__ = "categorias"

    id = Column(Integer, primary_key=True, index=True)
    nombre = Column(String(50), nullable=False, unique=True)
    icono = Column(String(50), nullable=True)
    color = Column(String(20), nullable=True)  # hex формат: #RRGGBB
    descripcion = Column(Text, nullable=True)
    fecha_creacion = Column(DateTime, default=datetime.now)
    fecha_actualizacion = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    poems = relationship("Poem", back_populates="category", passive_deletes="all")
