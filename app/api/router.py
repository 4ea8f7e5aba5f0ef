"""
Router principal de la API.
Incluye todos los endpoints de la aplicación.
"""
from fastapi import APIRouter

from app.api.endpoints import (
    auth,
    institutions,
    infrastructure,
    maintenance,
    reports,
    uploads,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Autenticación"])
api_router.include_router(institutions.router, prefix="/institutions", tags=["Instituciones"])
api_router.include_router(infrastructure.router, prefix="/infrastructure", tags=["Infraestructura"])
api_router.include_router(maintenance.router, prefix="/maintenance", tags=["Mantenimiento"])
api_router.include_router(reports.router, prefix="/reports", tags=["Reportes"])
api_router.include_router(uploads.router, prefix="/upload", tags=["Archivos"])
