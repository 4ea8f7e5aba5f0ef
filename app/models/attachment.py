"""
Modelo ORM para Archivos adjuntos.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.sql import func
from app.db.base import Base


class Attachment(Base):
    """
    Metadatos de un archivo subido.

    (related_table, related_id) referencia una institución, infraestructura
    o mantenimiento; related_table solo admite los valores de AttachmentTarget.
    """

    __tablename__ = "attachments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    related_table = Column(String(50), nullable=False)
    related_id = Column(Integer, nullable=False)
    filename = Column(String(255), nullable=False, unique=True)
    original_name = Column(String(255), nullable=False)
    file_path = Column(Text, nullable=False)
    mime_type = Column(String(100))
    file_size = Column(Integer)
    description = Column(Text)
    uploaded_at = Column(DateTime, server_default=func.now())
    uploaded_by = Column(Integer, ForeignKey("users.id"))

    __table_args__ = (
        Index("idx_attachments_related", "related_table", "related_id"),
    )
