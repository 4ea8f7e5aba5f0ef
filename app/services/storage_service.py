"""
Servicio de almacenamiento de archivos adjuntos en disco local.

Uso:
    from app.services.storage_service import storage_service

    error = storage_service.validate("application/pdf", len(content))
    stored = storage_service.save(content, "informe.pdf")
    # stored = {"filename": "file-3f2a....pdf", "file_path": "uploads/file-3f2a....pdf", "size": 12345}

    storage_service.delete(stored["file_path"])
"""
import logging
import uuid
from pathlib import Path
from typing import Optional

from app.config import get_settings

logger = logging.getLogger(__name__)


class StorageService:
    """
    Almacenamiento de adjuntos en UPLOAD_DIR con nombres únicos generados.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._initialized = True
        settings = get_settings()

        self.upload_dir = Path(settings.UPLOAD_DIR)
        self.max_file_size = settings.UPLOAD_MAX_SIZE
        self.allowed_types = set(settings.allowed_upload_types)

        # Crear directorio local si no existe
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"StorageService inicializado en: {self.upload_dir}")

    def _get_extension(self, filename: str) -> str:
        """Obtener extensión del archivo."""
        return Path(filename).suffix.lower()

    def _generate_filename(self, original_filename: str, prefix: str = "file") -> str:
        """Generar nombre único para archivo."""
        ext = self._get_extension(original_filename)
        unique_id = uuid.uuid4().hex
        return f"{prefix}-{unique_id}{ext}"

    def validate(self, mime_type: Optional[str], size: int) -> Optional[str]:
        """
        Validar tipo MIME y tamaño.

        Returns:
            Mensaje de error, o None si el archivo es aceptable
        """
        if mime_type not in self.allowed_types:
            return f"Tipo de archivo no permitido: {mime_type}"

        if size > self.max_file_size:
            max_mb = self.max_file_size / (1024 * 1024)
            return f"Archivo muy grande. Máximo: {max_mb:.1f}MB"

        if size == 0:
            return "El archivo está vacío"

        return None

    def save(self, content: bytes, original_filename: str, prefix: str = "file") -> dict:
        """
        Guardar archivo con nombre único.

        Returns:
            {"filename": ..., "file_path": ..., "size": ...}
        """
        filename = self._generate_filename(original_filename, prefix)
        file_path = self.upload_dir / filename
        try:
            file_path.write_bytes(content)
        except OSError as e:
            logger.error(f"Error guardando archivo: {e}")
            raise RuntimeError(f"Error al guardar archivo: {str(e)}")

        logger.info(f"Archivo guardado localmente: {file_path}")
        return {
            "filename": filename,
            "file_path": str(file_path),
            "size": len(content),
        }

    def exists(self, file_path: str) -> bool:
        return Path(file_path).is_file()

    def delete(self, file_path: str) -> bool:
        """
        Eliminar archivo del disco (best effort).

        Returns:
            True si se eliminó el archivo
        """
        if not file_path:
            return False

        path = Path(file_path)
        try:
            if path.exists():
                path.unlink()
                logger.info(f"Archivo eliminado localmente: {path}")
                return True
            logger.warning(f"Archivo no encontrado: {path}")
            return False
        except OSError as e:
            logger.error(f"Error eliminando localmente: {e}")
            return False


# Instancia Singleton del servicio
storage_service = StorageService()
