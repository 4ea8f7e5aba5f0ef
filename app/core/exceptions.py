"""
Excepciones personalizadas para la aplicación GMPI.
"""
from typing import Dict, List, Optional


class GMPIException(Exception):
    """Excepción base para todas las excepciones de GMPI."""

    status_code = 500

    def __init__(self, message: str = "Error en la aplicación"):
        self.message = message
        super().__init__(self.message)


class NotFoundException(GMPIException):
    """Excepción cuando un recurso no se encuentra."""

    status_code = 404

    def __init__(self, message: str = "Recurso no encontrado"):
        super().__init__(message)


class UnauthorizedException(GMPIException):
    """Excepción cuando el usuario no está autenticado."""

    status_code = 401

    def __init__(self, message: str = "No autorizado"):
        super().__init__(message)


class ForbiddenException(GMPIException):
    """Excepción cuando el usuario no tiene permisos."""

    status_code = 403

    def __init__(self, message: str = "Acceso prohibido"):
        super().__init__(message)


class BadRequestException(GMPIException):
    """Excepción cuando la solicitud es inválida."""

    status_code = 400

    def __init__(self, message: str = "Solicitud inválida"):
        super().__init__(message)


class ConflictException(GMPIException):
    """Excepción cuando hay un conflicto con el estado actual."""

    status_code = 409

    def __init__(self, message: str = "Conflicto con el recurso"):
        super().__init__(message)


class ValidationException(GMPIException):
    """Excepción cuando falla la validación de datos, con errores por campo."""

    status_code = 400

    def __init__(
        self,
        message: str = "Errores de validación",
        errors: Optional[List[Dict[str, str]]] = None
    ):
        self.errors = errors or []
        super().__init__(message)
