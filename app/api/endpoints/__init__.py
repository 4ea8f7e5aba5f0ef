"""
Endpoints de la API.
"""
from app.api.endpoints import (
    auth,
    institutions,
    infrastructure,
    maintenance,
    reports,
    uploads,
)

__all__ = [
    "auth",
    "institutions",
    "infrastructure",
    "maintenance",
    "reports",
    "uploads",
]
