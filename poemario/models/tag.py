from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Table
from sqlalchemy.orm import relationship

from poemario.db.base import Base


# Ассоциативная таблица для связи many-to-many между стихотворениями и тегами.
# Каскад на уровне БД не используется: удаление блокируется явной проверкой.
poem_tags = Table(
    "poema_etiquetas",
    Base.metadata,
    Column("poema_id", Integer, ForeignKey("poemas.id"), primary_key=True),
    Column("etiqueta_id", Integer, ForeignKey("etiquetas.id"), primary_key=True)
)


class Tag(Base):
    """Модель тега стихотворений"""

    __tablename__ = "etiquetas"

    id = Column(Integer, primary_key=True, index=True)
    nombre = Column(String(50), nullable=False, unique=True)
    fecha_creacion = Column(DateTime, default=datetime.now)

    poems = relationship("Poem", secondary=poem_tags, back_populates="tags")
