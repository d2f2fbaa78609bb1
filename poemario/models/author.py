from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.orm import relationship

from poemario.db.base import Base


class Author(Base):
    """Модель автора стихотворений"""

    __tablename__ = "autores"

    id = Column(Integer, primary_key=True, index=True)
    nombre = Column(String(100), nullable=False, unique=True)
    biografia = Column(Text, nullable=True)
    fecha_creacion = Column(DateTime, default=datetime.now)
    fecha_actualizacion = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    # Отношение one-to-many со стихотворениями (без каскадного удаления)
    poems = relationship("Poem", back_populates="author", passive_deletes="all")
