"""
Modelo ORM para Infraestructuras (edificios, laboratorios, facultades).
"""
from sqlalchemy import Column, Integer, String, Text, Float, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import Base, SoftDeleteMixin, TimestampMixin


class Infrastructure(Base, SoftDeleteMixin, TimestampMixin):
    """Edificio o instalación perteneciente a una institución."""

    __tablename__ = "infrastructures"

    id = Column(Integer, primary_key=True, autoincrement=True)
    institution_id = Column(
        Integer, ForeignKey("institutions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False)
    type = Column(String(100), nullable=False)
    location = Column(Text)
    capacity = Column(Integer)
    area_m2 = Column(Float)
    construction_year = Column(Integer)
    condition_status = Column(String(50), default="good", server_default="good")
    description = Column(Text)

    # Relationships
    institution = relationship("Institution", back_populates="infrastructures")
    maintenance_records = relationship(
        "MaintenanceRecord", back_populates="infrastructure", cascade="all, delete-orphan"
    )
