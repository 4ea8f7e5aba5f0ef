"""
Schemas para instituciones.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.schemas.common import normalize_enum


class InstitutionType(str, Enum):
    """Tipos de institución (valores almacenados)."""
    universidad = "universidad"
    colegio = "colegio"
    escuela = "escuela"
    instituto = "instituto"


INSTITUTION_TYPE_ALIASES = {
    "university": "universidad",
    "college": "colegio",
    "school": "escuela",
    "institute": "instituto",
}

# Plazas por aula y por laboratorio para calcular total_capacity
SEATS_PER_CLASSROOM = 30
SEATS_PER_LABORATORY = 20


def compute_total_capacity(classrooms_count: int, laboratories_count: int) -> int:
    """Capacidad total derivada del número de aulas y laboratorios."""
    return classrooms_count * SEATS_PER_CLASSROOM + laboratories_count * SEATS_PER_LABORATORY


class InstitutionBase(BaseModel):
    """
    Schema de institución. Se usa igual para crear y para actualizar
    (PUT reemplaza el registro completo).
    """

    name: str = Field(..., min_length=1, max_length=255)
    type: InstitutionType
    acronym: Optional[str] = Field(None, max_length=20)
    location: str = Field(..., min_length=1)
    address: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    website: Optional[str] = Field(None, max_length=255)
    buildings_count: int = Field(default=0, ge=0)
    classrooms_count: int = Field(default=0, ge=0)
    laboratories_count: int = Field(default=0, ge=0)

    model_config = {"str_strip_whitespace": True}

    @field_validator("type", mode="before")
    @classmethod
    def accept_english_type(cls, v):
        return normalize_enum(INSTITUTION_TYPE_ALIASES, v)

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_row(self) -> dict:
        """Columnas a persistir, con total_capacity recalculado."""
        row = self.model_dump(mode="json")
        row["total_capacity"] = compute_total_capacity(
            self.classrooms_count, self.laboratories_count
        )
        return row


class InstitutionCreate(InstitutionBase):
    """Schema para crear institución."""
    pass


class InstitutionUpdate(InstitutionBase):
    """Schema para actualizar institución."""
    pass
