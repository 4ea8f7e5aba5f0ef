"""
Schemas para infraestructuras.
"""
from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ConditionStatus(str, Enum):
    """Estado físico de una infraestructura."""
    excellent = "excellent"
    good = "good"
    fair = "fair"
    poor = "poor"
    critical = "critical"


class InfrastructureBase(BaseModel):
    """Campos comunes de infraestructura."""

    name: str = Field(..., min_length=1, max_length=255)
    type: str = Field(..., min_length=1, max_length=100)
    location: Optional[str] = None
    capacity: Optional[int] = Field(None, ge=0)
    area_m2: Optional[float] = Field(None, ge=0)
    construction_year: Optional[int] = Field(None, ge=1800)
    condition_status: ConditionStatus = ConditionStatus.good
    description: Optional[str] = None

    model_config = {"str_strip_whitespace": True}

    @field_validator("construction_year")
    @classmethod
    def not_in_future(cls, v: Optional[int]) -> Optional[int]:
        """El año de construcción no puede ser posterior al actual."""
        if v is not None and v > date.today().year:
            raise ValueError("Año de construcción inválido")
        return v


class InfrastructureCreate(InfrastructureBase):
    """Schema para crear infraestructura."""

    institution_id: int = Field(..., ge=1)


class InfrastructureUpdate(InfrastructureBase):
    """Schema para actualizar infraestructura (reemplazo completo)."""
    pass
