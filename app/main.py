"""
Aplicación FastAPI principal de GMPI.
"""
import logging
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.router import api_router
from app.config import settings
from app.core.exceptions import GMPIException, ValidationException
from app.core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from app.core.rate_limiter import limiter, rate_limit_exceeded_handler
from app.db.session import get_db_connection
from app.schemas.common import ErrorResponse
from app.services.init_service import run_initialization

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Crear aplicación FastAPI
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
    ## GMPI - Gestión de Mantenimiento de Infraestructura Educativa

    API REST para administrar instituciones educativas, su infraestructura
    y los mantenimientos programados y realizados.

    ### Recursos:

    * **Autenticación JWT** - registro, login, perfil y renovación de token
    * **Instituciones** - CRUD con soft delete y resumen estadístico
    * **Infraestructura** - edificios e instalaciones de cada institución
    * **Mantenimiento** - programación, seguimiento y cierre
    * **Reportes** - tablero, costos y próximos vencimientos
    * **Archivos** - adjuntos para instituciones, infraestructuras y mantenimientos
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Middlewares (el último agregado es el primero en ejecutarse)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)


# ===========================================
# EXCEPTION HANDLERS
# ===========================================

VALIDATION_MESSAGES = {
    "missing": "Campo requerido",
    "string_too_short": "Debe tener al menos {min_length} caracteres",
    "string_too_long": "No puede exceder {max_length} caracteres",
    "string_type": "Debe ser texto",
    "enum": "Valor inválido. Valores permitidos: {expected}",
    "greater_than": "Debe ser mayor que {gt}",
    "greater_than_equal": "Debe ser mayor o igual a {ge}",
    "less_than": "Debe ser menor que {lt}",
    "less_than_equal": "Debe ser menor o igual a {le}",
    "int_parsing": "Debe ser un número entero",
    "int_type": "Debe ser un número entero",
    "int_from_float": "Debe ser un número entero",
    "float_parsing": "Debe ser un número",
    "float_type": "Debe ser un número",
    "bool_parsing": "Debe ser verdadero o falso",
    "date_parsing": "Fecha inválida (formato YYYY-MM-DD)",
    "date_from_datetime_parsing": "Fecha inválida (formato YYYY-MM-DD)",
    "date_type": "Fecha inválida (formato YYYY-MM-DD)",
    "json_invalid": "JSON inválido",
    "model_attributes_type": "Se esperaba un objeto",
    "dict_type": "Se esperaba un objeto",
    "list_type": "Se esperaba una lista",
}


def _validation_message(error: dict) -> str:
    """Mensaje en español para un error de Pydantic."""
    ctx = error.get("ctx") or {}
    error_type = error.get("type", "")

    if error_type == "value_error":
        if "error" in ctx:
            return str(ctx["error"])
        if "email" in str(error.get("loc", "")):
            return "Email inválido"
        return "Valor inválido"

    template = VALIDATION_MESSAGES.get(error_type)
    if template is None:
        return "Valor inválido"
    try:
        return template.format(**ctx)
    except (KeyError, IndexError):
        return template.split(".")[0]


def _validation_field(error: dict) -> str:
    loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
    return ".".join(loc) or "body"


def _error_response(status_code: int, message: str, errors=None) -> JSONResponse:
    content = ErrorResponse(message=message, errors=errors or None)
    return JSONResponse(status_code=status_code, content=content.model_dump(exclude_none=True))


@app.exception_handler(GMPIException)
async def gmpi_exception_handler(request: Request, exc: GMPIException):
    """Handler para las excepciones de la aplicación."""
    errors = exc.errors if isinstance(exc, ValidationException) else None
    return _error_response(exc.status_code, exc.message, errors)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handler para errores de validación de Pydantic: 400 con errores por campo."""
    errors = [
        {"field": _validation_field(error), "message": _validation_message(error)}
        for error in exc.errors()
    ]
    return _error_response(status.HTTP_400_BAD_REQUEST, "Errores de validación", errors)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handler para HTTPException con el formato estándar."""
    message = exc.detail if isinstance(exc.detail, str) else "Error en la solicitud"
    return _error_response(exc.status_code, message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Cualquier otro error: se registra y se responde 500 sin detalles."""
    logger.exception(f"Error no controlado en {request.method} {request.url.path}")
    message = f"Error interno del servidor: {exc}" if settings.DEBUG else "Error interno del servidor"
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message)


# ===========================================
# RUTAS
# ===========================================

app.include_router(api_router, prefix="/api")


@app.get("/api/health", tags=["Health"])
async def health_check():
    """
    Endpoint de health check para monitoreo.
    """
    return {
        "success": True,
        "message": "GMPI API funcionando correctamente",
        "data": {"status": "healthy", "version": settings.APP_VERSION},
    }


# Frontend estático
frontend_path = Path(settings.FRONTEND_DIR)
index_file = frontend_path / "html" / "index.html"
if frontend_path.is_dir():
    app.mount("/static", StaticFiles(directory=str(frontend_path)), name="static")


@app.get("/{full_path:path}", include_in_schema=False)
@limiter.exempt
async def spa_fallback(full_path: str):
    """
    Rutas /api desconocidas responden 404; el resto devuelve la página
    principal del frontend.
    """
    if full_path == "api" or full_path.startswith("api/"):
        return _error_response(status.HTTP_404_NOT_FOUND, "Endpoint no encontrado")

    if not index_file.is_file():
        return _error_response(status.HTTP_404_NOT_FOUND, "Página no encontrada")

    return FileResponse(index_file, media_type="text/html")


# ===========================================
# EVENTOS
# ===========================================

@app.on_event("startup")
async def startup_event():
    """
    Crear tablas, usuario administrador y datos de ejemplo si faltan.
    """
    logger.info(f"{settings.APP_NAME} v{settings.APP_VERSION} iniciando")
    logger.info("Documentación disponible en: /docs")
    run_initialization(get_db_connection(), seed=settings.SEED_DEMO_DATA)


@app.on_event("shutdown")
async def shutdown_event():
    """
    Cerrar conexiones al apagar la aplicación.
    """
    get_db_connection().close()
    logger.info(f"{settings.APP_NAME} detenida")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
