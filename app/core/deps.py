"""
Dependencias comunes de FastAPI.
"""
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from app.core.exceptions import ForbiddenException, UnauthorizedException
from app.core.security import decode_token
from app.db.session import get_db  # noqa: F401  re-exportado para los endpoints

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Dict[str, Any]:
    """
    Obtener los claims del usuario actual desde el JWT.

    No consulta la base de datos: un token válido sigue siéndolo hasta
    que expira.

    Args:
        credentials: Credenciales HTTP Bearer

    Returns:
        Claims del token (id, username, email, role)

    Raises:
        UnauthorizedException: Si falta el token o es inválido/expirado
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException("Acceso denegado. Token requerido.")

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise UnauthorizedException("Token inválido")

    if payload.get("type") != "access" or payload.get("id") is None:
        raise UnauthorizedException("Token inválido")

    return payload


async def get_current_admin_user(
    current_user: Dict[str, Any] = Depends(get_current_user)
) -> Dict[str, Any]:
    """
    Verificar que el usuario actual sea administrador.

    Raises:
        ForbiddenException: Si el usuario no es administrador
    """
    if current_user.get("role") != "admin":
        raise ForbiddenException("No tiene permisos de administrador")

    return current_user
