"""
Schemas para archivos adjuntos.
"""
from enum import Enum


class AttachmentTarget(str, Enum):
    """Entidades a las que se puede adjuntar un archivo."""
    institutions = "institutions"
    infrastructures = "infrastructures"
    maintenance_records = "maintenance_records"
