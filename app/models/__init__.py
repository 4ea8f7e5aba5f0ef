"""
Modelos ORM de GMPI.
Importar este paquete registra todas las tablas en Base.metadata.
"""
from app.models.user import User
from app.models.institution import Institution
from app.models.infrastructure import Infrastructure
from app.models.maintenance import MaintenanceRecord
from app.models.attachment import Attachment
from app.models.system_config import SystemConfig

__all__ = [
    "User",
    "Institution",
    "Infrastructure",
    "MaintenanceRecord",
    "Attachment",
    "SystemConfig",
]
