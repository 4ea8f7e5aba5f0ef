"""
Rate limiting de la API con slowapi.

El límite (RATE_LIMIT_MAX por RATE_LIMIT_WINDOW minutos, por IP) aplica
a las rutas bajo /api; SlowAPIMiddleware lo evalúa en cada request.
"""
import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from app.config import settings

logger = logging.getLogger(__name__)


# Ventana compartida por todas las rutas de la API; las rutas del frontend
# se marcan con @limiter.exempt
limiter = Limiter(
    key_func=get_remote_address,
    application_limits=[settings.rate_limit],
    enabled=settings.RATE_LIMIT_ENABLED,
    strategy="fixed-window",
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Respuesta 429 con el formato estándar de la API."""
    logger.warning(f"Rate limit excedido para {get_remote_address(request)}: {exc.detail}")

    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "message": "Demasiadas solicitudes desde esta IP, intenta de nuevo más tarde.",
        },
    )
