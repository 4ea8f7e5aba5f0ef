"""
Schemas para mantenimientos.
"""
from datetime import date
from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator, Field, field_validator, model_validator

from app.schemas.common import normalize_enum


class MaintenanceType(str, Enum):
    """Tipos de mantenimiento (valores almacenados)."""
    preventivo = "preventivo"
    correctivo = "correctivo"
    predictivo = "predictivo"
    emergencia = "emergencia"


OWNER_REQUIRED_MESSAGE = "Debe especificar al menos una institución o infraestructura"

MAINTENANCE_TYPE_ALIASES = {
    "preventive": "preventivo",
    "corrective": "correctivo",
    "predictive": "predictivo",
    "emergency": "emergencia",
}


class MaintenancePriority(str, Enum):
    """Prioridad de un mantenimiento."""
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"


class MaintenanceStatus(str, Enum):
    """Estados de un mantenimiento."""
    scheduled = "scheduled"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"
    overdue = "overdue"


def _accept_english_type(v):
    return normalize_enum(MAINTENANCE_TYPE_ALIASES, v)


# Acepta "preventive" además de "preventivo", etc.
MaintenanceTypeField = Annotated[MaintenanceType, BeforeValidator(_accept_english_type)]


class MaintenanceCreate(BaseModel):
    """Schema para crear mantenimiento."""

    institution_id: Optional[int] = Field(None, ge=1)
    infrastructure_id: Optional[int] = Field(None, ge=1)
    type: MaintenanceTypeField
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    scheduled_date: date
    priority: MaintenancePriority = MaintenancePriority.medium
    contractor: Optional[str] = Field(None, max_length=255)
    cost: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None

    model_config = {"str_strip_whitespace": True}

    @model_validator(mode="after")
    def require_owner(self):
        """Al menos institución o infraestructura."""
        if self.institution_id is None and self.infrastructure_id is None:
            raise ValueError(OWNER_REQUIRED_MESSAGE)
        return self


class MaintenanceUpdate(BaseModel):
    """
    Schema para actualización parcial de mantenimiento.

    Solo los campos enviados se escriben; los nombres de columna salen de
    este schema, nunca del cuerpo del request.
    """

    institution_id: Optional[int] = Field(None, ge=1)
    infrastructure_id: Optional[int] = Field(None, ge=1)
    type: Optional[MaintenanceTypeField] = None
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    scheduled_date: Optional[date] = None
    completed_date: Optional[date] = None
    next_due_date: Optional[date] = None
    priority: Optional[MaintenancePriority] = None
    status: Optional[MaintenanceStatus] = None
    cost: Optional[float] = Field(None, ge=0)
    contractor: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None

    model_config = {"str_strip_whitespace": True}

    @field_validator("type", "title", "priority", "status")
    @classmethod
    def not_null(cls, v):
        """Estos campos pueden omitirse pero no vaciarse con null."""
        if v is None:
            raise ValueError("Este campo no puede ser nulo")
        return v


class MaintenanceComplete(BaseModel):
    """Schema para marcar un mantenimiento como completado."""

    notes: Optional[str] = None
    actual_cost: Optional[float] = Field(None, ge=0)
