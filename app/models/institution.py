"""
Modelo ORM para Instituciones educativas.
"""
from sqlalchemy import Column, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import Base, SoftDeleteMixin, TimestampMixin


class Institution(Base, SoftDeleteMixin, TimestampMixin):
    """Universidad, colegio, escuela o instituto."""

    __tablename__ = "institutions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    type = Column(String(50), nullable=False, index=True)
    acronym = Column(String(20))
    location = Column(Text, nullable=False)
    address = Column(Text)
    phone = Column(String(20))
    email = Column(String(100))
    website = Column(String(255))
    buildings_count = Column(Integer, default=0, server_default="0")
    classrooms_count = Column(Integer, default=0, server_default="0")
    laboratories_count = Column(Integer, default=0, server_default="0")
    total_capacity = Column(Integer, default=0, server_default="0")
    created_by = Column(Integer, ForeignKey("users.id"))

    # Relationships
    infrastructures = relationship(
        "Infrastructure", back_populates="institution", cascade="all, delete-orphan"
    )
    maintenance_records = relationship(
        "MaintenanceRecord", back_populates="institution", cascade="all, delete-orphan"
    )
