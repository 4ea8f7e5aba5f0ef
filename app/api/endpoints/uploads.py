"""
Endpoints para subir y descargar archivos adjuntos.

Cada archivo se guarda en UPLOAD_DIR con un nombre único y se registra en
la tabla attachments ligado a una institución, infraestructura o
mantenimiento existente.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import FileResponse

from app.config import settings
from app.core.deps import get_current_user, get_db
from app.core.exceptions import BadRequestException, NotFoundException
from app.crud.attachment import attachment as crud_attachment
from app.crud.infrastructure import infrastructure as crud_infrastructure
from app.crud.institution import institution as crud_institution
from app.crud.maintenance import maintenance as crud_maintenance
from app.db.session import Database
from app.schemas.attachment import AttachmentTarget
from app.schemas.common import ApiResponse, list_response
from app.services.storage_service import storage_service

logger = logging.getLogger(__name__)

router = APIRouter()

TARGET_CRUD = {
    AttachmentTarget.institutions: crud_institution,
    AttachmentTarget.infrastructures: crud_infrastructure,
    AttachmentTarget.maintenance_records: crud_maintenance,
}


def _check_target(db: Database, related_table: AttachmentTarget, related_id: int) -> None:
    """Verificar que la entidad a la que se adjunta exista."""
    if not TARGET_CRUD[related_table].exists(db, related_id):
        raise NotFoundException("Registro relacionado no encontrado")


def _with_urls(row: Dict[str, Any]) -> Dict[str, Any]:
    url = f"/api/upload/files/{row['filename']}"
    row["url"] = url
    row["download_url"] = f"{url}?download=true"
    return row


async def _read_and_validate(file: UploadFile) -> bytes:
    """Leer el archivo y validar tipo y tamaño."""
    if not file or not file.filename:
        raise BadRequestException("No se recibió ningún archivo")

    content = await file.read()
    error = storage_service.validate(file.content_type, len(content))
    if error:
        raise BadRequestException(f"{file.filename}: {error}")
    return content


def _register(
    db: Database,
    stored: Dict[str, Any],
    file: UploadFile,
    related_table: AttachmentTarget,
    related_id: int,
    description: Optional[str],
    user_id: Optional[int]
) -> Dict[str, Any]:
    row = crud_attachment.create(db, obj_in={
        "related_table": related_table.value,
        "related_id": related_id,
        "filename": stored["filename"],
        "original_name": file.filename,
        "file_path": stored["file_path"],
        "mime_type": file.content_type,
        "file_size": stored["size"],
        "description": description,
        "uploaded_by": user_id,
    })
    return _with_urls(row)


@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: UploadFile = File(...),
    related_table: AttachmentTarget = Form(...),
    related_id: int = Form(..., ge=1),
    description: Optional[str] = Form(None),
    db: Database = Depends(get_db),
    current_user: Dict[str, Any] = Depends(get_current_user)
):
    """
    Subir un archivo y adjuntarlo a una entidad.

    Tipos permitidos y tamaño máximo según UPLOAD_ALLOWED_TYPES y
    UPLOAD_MAX_SIZE.
    """
    _check_target(db, related_table, related_id)
    content = await _read_and_validate(file)

    stored = storage_service.save(content, file.filename, prefix="file")
    try:
        row = _register(db, stored, file, related_table, related_id, description, current_user["id"])
    except Exception:
        storage_service.delete(stored["file_path"])
        raise

    return ApiResponse(message="Archivo subido exitosamente", data=row)


@router.post("/multiple", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def upload_multiple_files(
    files: List[UploadFile] = File(...),
    related_table: AttachmentTarget = Form(...),
    related_id: int = Form(..., ge=1),
    description: Optional[str] = Form(None),
    db: Database = Depends(get_db),
    current_user: Dict[str, Any] = Depends(get_current_user)
):
    """
    Subir varios archivos a la misma entidad.

    Si alguno no es válido no se registra ninguno y se eliminan los que ya
    se habían guardado.
    """
    if len(files) > settings.UPLOAD_MAX_FILES:
        raise BadRequestException(f"Máximo {settings.UPLOAD_MAX_FILES} archivos por solicitud")

    _check_target(db, related_table, related_id)

    saved: List[tuple] = []
    try:
        for file in files:
            content = await _read_and_validate(file)
            saved.append((file, storage_service.save(content, file.filename, prefix="files")))
    except Exception:
        for _, stored in saved:
            storage_service.delete(stored["file_path"])
        raise

    rows = []
    try:
        for file, stored in saved:
            rows.append(
                _register(db, stored, file, related_table, related_id, description, current_user["id"])
            )
    except Exception:
        for row in rows:
            crud_attachment.remove(db, id=row["id"])
        for _, stored in saved:
            storage_service.delete(stored["file_path"])
        raise

    return ApiResponse(
        message=f"{len(rows)} archivos subidos exitosamente",
        data=rows,
        count=len(rows),
    )


@router.get("/files/{filename}")
def get_file(
    filename: str,
    download: bool = Query(False, description="Forzar descarga"),
    db: Database = Depends(get_db)
):
    """
    Servir un archivo adjunto con su nombre original y tipo MIME.
    """
    row = crud_attachment.get_by_filename(db, filename)
    if not row:
        raise NotFoundException("Archivo no encontrado")

    if not storage_service.exists(row["file_path"]):
        logger.warning(f"Archivo registrado sin contenido en disco: {row['file_path']}")
        raise NotFoundException("Archivo no encontrado en el servidor")

    return FileResponse(
        row["file_path"],
        media_type=row["mime_type"],
        filename=row["original_name"],
        content_disposition_type="attachment" if download else "inline",
    )


@router.get("/attachments/{related_table}/{related_id}", response_model=ApiResponse)
def get_attachments(
    related_table: AttachmentTarget,
    related_id: int,
    db: Database = Depends(get_db)
):
    """Listar los adjuntos de una entidad."""
    rows = [_with_urls(row) for row in crud_attachment.get_for(db, related_table.value, related_id)]
    return list_response(rows)


@router.delete("/attachments/{attachment_id}", response_model=ApiResponse)
def delete_attachment(
    attachment_id: int,
    db: Database = Depends(get_db),
    current_user: Dict[str, Any] = Depends(get_current_user)
):
    """
    Eliminar un adjunto: el archivo en disco (si existe) y su registro.
    """
    row = crud_attachment.get(db, attachment_id)
    if not row:
        raise NotFoundException("Archivo no encontrado")

    storage_service.delete(row["file_path"])
    crud_attachment.remove(db, id=attachment_id)

    return ApiResponse(message="Archivo eliminado exitosamente")
