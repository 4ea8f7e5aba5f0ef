"""
Schemas comunes reutilizables.
"""
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel


class ApiResponse(BaseModel):
    """Envoltura estándar de todas las respuestas de la API."""

    success: bool = True
    message: Optional[str] = None
    data: Optional[Any] = None
    count: Optional[int] = None

    model_config = {"from_attributes": True}


class FieldError(BaseModel):
    """Error de validación de un campo."""

    field: str
    message: str


class ErrorResponse(BaseModel):
    """Schema de respuesta de error."""

    success: bool = False
    message: str
    errors: Optional[List[FieldError]] = None


def normalize_enum(aliases: Mapping[str, str], value: Any) -> Any:
    """
    Traducir alias en inglés al valor almacenado en español.

    Los valores desconocidos se devuelven tal cual para que la validación
    del Enum los rechace.
    """
    if isinstance(value, str):
        key = value.strip().lower()
        return aliases.get(key, key)
    return value


def list_response(items: List[Dict[str, Any]], **extra: Any) -> ApiResponse:
    """Respuesta de listado con el total de elementos."""
    return ApiResponse(data=items, count=len(items), **extra)
