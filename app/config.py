"""
Configuración de la aplicación GMPI.
Maneja variables de entorno y settings globales.
"""
from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuración de la aplicación usando Pydantic Settings v2."""

    # Database (archivo SQLite)
    DB_PATH: str = "./database/gmpi.db"

    # Security (REQUERIDO - debe estar en .env)
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 días

    # Application
    APP_NAME: str = "GMPI API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:8080"

    # Rate limiting (solo rutas /api)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_WINDOW: int = 15  # minutos
    RATE_LIMIT_MAX: int = 100

    # Usuario administrador inicial
    ADMIN_USERNAME: str = "admin"
    ADMIN_EMAIL: str = "admin@gmpi.local"
    ADMIN_PASSWORD: str = "admin123"

    # Datos de demostración al primer arranque
    SEED_DEMO_DATA: bool = True

    # File Upload
    UPLOAD_DIR: str = "./uploads"
    UPLOAD_MAX_SIZE: int = 5242880  # 5MB
    UPLOAD_MAX_FILES: int = 10
    UPLOAD_ALLOWED_TYPES: str = "image/jpeg,image/png,image/gif,application/pdf,text/plain"

    # Frontend estático
    FRONTEND_DIR: str = "./frontend"

    # Computed properties
    @property
    def allowed_origins_list(self) -> List[str]:
        """Convierte ALLOWED_ORIGINS string a lista."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    @property
    def allowed_upload_types(self) -> List[str]:
        """Convierte UPLOAD_ALLOWED_TYPES string a lista."""
        return [t.strip() for t in self.UPLOAD_ALLOWED_TYPES.split(",") if t.strip()]

    @property
    def database_url(self) -> str:
        """URL de SQLAlchemy para el archivo SQLite."""
        return f"sqlite:///{Path(self.DB_PATH).as_posix()}"

    @property
    def rate_limit(self) -> str:
        """Límite en notación de slowapi."""
        return f"{self.RATE_LIMIT_MAX}/{self.RATE_LIMIT_WINDOW} minutes"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Instancia Singleton de settings
_settings_instance = None


def get_settings() -> Settings:
    """
    Obtener instancia Singleton de configuración.
    Se carga una sola vez y se reutiliza.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


# Instancia global de settings (Singleton)
settings = get_settings()
