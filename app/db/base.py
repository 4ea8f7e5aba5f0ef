"""
Base declarativa de SQLAlchemy con soporte para Soft Delete.
Todos los modelos heredan de esta clase base.
"""
from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

STATUS_ACTIVE = "active"
STATUS_DELETED = "deleted"


class SoftDeleteMixin:
    """
    Mixin que agrega soporte para soft delete a los modelos.

    El borrado suave cambia la columna status a 'deleted'; las consultas
    por defecto solo devuelven filas con status 'active'.
    """

    status = Column(String(20), default=STATUS_ACTIVE, server_default=STATUS_ACTIVE, index=True)


class TimestampMixin:
    """Columnas created_at / updated_at gestionadas por la base de datos."""

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now())


# Base declarativa de SQLAlchemy
Base = declarative_base()
