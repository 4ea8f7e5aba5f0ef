"""
Endpoints de instituciones.
"""
from datetime import date
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from app.core.deps import get_current_admin_user, get_current_user, get_db
from app.core.exceptions import ConflictException, NotFoundException
from app.crud.institution import institution as crud_institution
from app.db.base import STATUS_ACTIVE
from app.db.session import Database
from app.schemas.common import ApiResponse, list_response, normalize_enum
from app.schemas.institution import INSTITUTION_TYPE_ALIASES, InstitutionCreate, InstitutionUpdate

router = APIRouter()


@router.get("", response_model=ApiResponse)
def get_institutions(
    type: Optional[str] = Query(None, description="Filtrar por tipo"),
    status: str = Query(STATUS_ACTIVE, description="active | deleted"),
    search: Optional[str] = Query(None, description="Busca en nombre, ubicación y siglas"),
    created_from: Optional[date] = Query(None, description="Creadas desde"),
    created_to: Optional[date] = Query(None, description="Creadas hasta"),
    db: Database = Depends(get_db)
):
    """
    Obtener lista de instituciones.

    Cada institución incluye maintenance_stats con totales de mantenimiento.
    """
    institutions = crud_institution.get_multi(
        db,
        type=normalize_enum(INSTITUTION_TYPE_ALIASES, type) if type else None,
        status=status,
        search=search,
        created_from=created_from.isoformat() if created_from else None,
        created_to=created_to.isoformat() if created_to else None,
    )

    for item in institutions:
        item["maintenance_stats"] = crud_institution.maintenance_stats(db, item["id"])

    return list_response(institutions)


@router.get("/stats/summary", response_model=ApiResponse)
def get_summary(db: Database = Depends(get_db)):
    """
    Estadísticas generales de instituciones y mantenimientos.
    """
    maintenance = db.fetch_one(
        """
        SELECT
            COUNT(*) AS total_maintenance,
            COUNT(CASE WHEN status = 'scheduled' THEN 1 END) AS pending_maintenance,
            COUNT(CASE WHEN status = 'completed' THEN 1 END) AS completed_maintenance,
            COUNT(CASE WHEN status = 'overdue' THEN 1 END) AS overdue_maintenance
        FROM maintenance_records
        """
    )
    return ApiResponse(data={
        "institutions": crud_institution.summary(db),
        "maintenance": maintenance,
    })


@router.get("/{institution_id}", response_model=ApiResponse)
def get_institution(
    institution_id: int,
    include_deleted: bool = Query(False, description="Incluir instituciones eliminadas"),
    db: Database = Depends(get_db)
):
    """
    Obtener una institución con sus infraestructuras y sus últimos
    10 mantenimientos.
    """
    institution = crud_institution.get(db, institution_id, include_deleted=include_deleted)
    if not institution:
        raise NotFoundException("Institución no encontrada")

    institution["infrastructures"] = crud_institution.infrastructures(db, institution_id)
    institution["maintenance_history"] = crud_institution.maintenance_history(db, institution_id)

    return ApiResponse(data=institution)


@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
def create_institution(
    institution_in: InstitutionCreate,
    db: Database = Depends(get_db),
    current_user: Dict[str, Any] = Depends(get_current_user)
):
    """
    Crear nueva institución.

    total_capacity se calcula como aulas x 30 + laboratorios x 20.
    """
    if crud_institution.get_by_name(db, institution_in.name):
        raise ConflictException("Ya existe una institución con ese nombre")

    row = institution_in.to_row()
    row["created_by"] = current_user["id"]
    institution = crud_institution.create(db, obj_in=row)

    return ApiResponse(message="Institución creada exitosamente", data=institution)


@router.put("/{institution_id}", response_model=ApiResponse)
def update_institution(
    institution_id: int,
    institution_in: InstitutionUpdate,
    db: Database = Depends(get_db),
    current_user: Dict[str, Any] = Depends(get_current_user)
):
    """
    Reemplazar los datos de una institución activa.
    """
    if not crud_institution.exists(db, institution_id):
        raise NotFoundException("Institución no encontrada")

    duplicate = crud_institution.get_by_name(db, institution_in.name)
    if duplicate and duplicate["id"] != institution_id:
        raise ConflictException("Ya existe una institución con ese nombre")

    institution = crud_institution.update(db, id=institution_id, obj_in=institution_in.to_row())

    return ApiResponse(message="Institución actualizada exitosamente", data=institution)


@router.delete("/{institution_id}", response_model=ApiResponse)
def delete_institution(
    institution_id: int,
    db: Database = Depends(get_db),
    current_user: Dict[str, Any] = Depends(get_current_admin_user)
):
    """
    Eliminar institución (soft delete). Requiere rol admin.
    """
    if not crud_institution.soft_delete(db, id=institution_id):
        raise NotFoundException("Institución no encontrada")

    return ApiResponse(message="Institución eliminada exitosamente")
