"""
Endpoints de infraestructuras.
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from app.core.deps import get_current_user, get_db
from app.core.exceptions import NotFoundException
from app.crud.infrastructure import infrastructure as crud_infrastructure
from app.crud.institution import institution as crud_institution
from app.db.base import STATUS_ACTIVE
from app.db.session import Database
from app.schemas.common import ApiResponse, list_response
from app.schemas.infrastructure import InfrastructureCreate, InfrastructureUpdate

router = APIRouter()


@router.get("", response_model=ApiResponse)
def get_infrastructures(
    institution_id: Optional[int] = Query(None, description="Filtrar por institución"),
    type: Optional[str] = Query(None, description="Filtrar por tipo"),
    status: str = Query(STATUS_ACTIVE, description="active | deleted"),
    search: Optional[str] = Query(None, description="Busca en nombre y ubicación"),
    db: Database = Depends(get_db)
):
    """
    Obtener lista de infraestructuras con el nombre de su institución.
    """
    items = crud_infrastructure.get_multi(
        db,
        institution_id=institution_id,
        type=type,
        status=status,
        search=search,
    )
    return list_response(items)


@router.get("/{infrastructure_id}", response_model=ApiResponse)
def get_infrastructure(
    infrastructure_id: int,
    include_deleted: bool = Query(False, description="Incluir infraestructuras eliminadas"),
    db: Database = Depends(get_db)
):
    """
    Obtener una infraestructura con su historial de mantenimiento.
    """
    item = crud_infrastructure.get_detail(db, infrastructure_id, include_deleted=include_deleted)
    if not item:
        raise NotFoundException("Infraestructura no encontrada")

    item["maintenance_history"] = crud_infrastructure.maintenance_history(db, infrastructure_id)
    return ApiResponse(data=item)


@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
def create_infrastructure(
    infrastructure_in: InfrastructureCreate,
    db: Database = Depends(get_db),
    current_user: Dict[str, Any] = Depends(get_current_user)
):
    """
    Crear infraestructura dentro de una institución activa.
    """
    if not crud_institution.exists(db, infrastructure_in.institution_id):
        raise NotFoundException("Institución no encontrada")

    created = crud_infrastructure.create(db, obj_in=infrastructure_in.model_dump(mode="json"))
    item = crud_infrastructure.get_detail(db, created["id"])

    return ApiResponse(message="Infraestructura creada exitosamente", data=item)


@router.put("/{infrastructure_id}", response_model=ApiResponse)
def update_infrastructure(
    infrastructure_id: int,
    infrastructure_in: InfrastructureUpdate,
    db: Database = Depends(get_db),
    current_user: Dict[str, Any] = Depends(get_current_user)
):
    """
    Reemplazar los datos de una infraestructura activa.
    """
    if not crud_infrastructure.exists(db, infrastructure_id):
        raise NotFoundException("Infraestructura no encontrada")

    crud_infrastructure.update(
        db, id=infrastructure_id, obj_in=infrastructure_in.model_dump(mode="json")
    )
    item = crud_infrastructure.get_detail(db, infrastructure_id)

    return ApiResponse(message="Infraestructura actualizada exitosamente", data=item)


@router.delete("/{infrastructure_id}", response_model=ApiResponse)
def delete_infrastructure(
    infrastructure_id: int,
    db: Database = Depends(get_db),
    current_user: Dict[str, Any] = Depends(get_current_user)
):
    """Eliminar infraestructura (soft delete)."""
    if not crud_infrastructure.soft_delete(db, id=infrastructure_id):
        raise NotFoundException("Infraestructura no encontrada")

    return ApiResponse(message="Infraestructura eliminada exitosamente")
