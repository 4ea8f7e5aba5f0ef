"""
Modelo ORM para Registros de mantenimiento.
"""
from sqlalchemy import Column, Integer, String, Text, Float, Date, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import Base, TimestampMixin


class MaintenanceRecord(Base, TimestampMixin):
    """
    Evento de mantenimiento de una institución y/o infraestructura.

    Las fechas se guardan como texto ISO (YYYY-MM-DD).
    """

    __tablename__ = "maintenance_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    institution_id = Column(
        Integer, ForeignKey("institutions.id", ondelete="CASCADE"), index=True
    )
    infrastructure_id = Column(
        Integer, ForeignKey("infrastructures.id", ondelete="CASCADE"), index=True
    )
    type = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    scheduled_date = Column(Date, index=True)
    completed_date = Column(Date)
    next_due_date = Column(Date)
    priority = Column(String(20), default="medium", server_default="medium")
    status = Column(String(30), default="scheduled", server_default="scheduled", index=True)
    cost = Column(Float)
    contractor = Column(String(255))
    notes = Column(Text)
    created_by = Column(Integer, ForeignKey("users.id"))

    # Relationships
    institution = relationship("Institution", back_populates="maintenance_records")
    infrastructure = relationship("Infrastructure", back_populates="maintenance_records")
