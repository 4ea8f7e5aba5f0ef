"""
Modelo ORM para Configuración del sistema (clave/valor).
"""
from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from app.db.base import Base


class SystemConfig(Base):
    """Parámetro de configuración persistido."""

    __tablename__ = "system_config"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key_name = Column(String(100), unique=True, nullable=False)
    value = Column(Text)
    description = Column(Text)
    updated_at = Column(DateTime, server_default=func.now())
