"""
Endpoints de mantenimientos.
"""
from datetime import date, timedelta
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from app.core.deps import get_current_user, get_db
from app.core.exceptions import NotFoundException
from app.crud.maintenance import SELECT_WITH_OWNERS
from app.crud.maintenance import maintenance as crud_maintenance
from app.db.session import Database
from app.schemas.common import ApiResponse, list_response, normalize_enum
from app.schemas.maintenance import (
    MAINTENANCE_TYPE_ALIASES,
    MaintenanceComplete,
    MaintenanceCreate,
    MaintenancePriority,
    MaintenanceStatus,
    MaintenanceUpdate,
)
from app.services import maintenance_service

router = APIRouter()


@router.get("", response_model=ApiResponse)
def get_maintenance_records(
    institution_id: Optional[int] = Query(None),
    infrastructure_id: Optional[int] = Query(None),
    status: Optional[MaintenanceStatus] = Query(None),
    type: Optional[str] = Query(None, description="preventivo | correctivo | predictivo | emergencia"),
    priority: Optional[MaintenancePriority] = Query(None),
    start_date: Optional[date] = Query(None, description="Programados desde"),
    end_date: Optional[date] = Query(None, description="Programados hasta"),
    overdue: bool = Query(False, description="Solo programados con fecha pasada"),
    db: Database = Depends(get_db)
):
    """
    Obtener lista de mantenimientos.

    Con overdue=true devuelve solo los registros 'scheduled' cuya fecha
    programada es anterior a hoy.
    """
    records = crud_maintenance.get_multi(
        db,
        today=maintenance_service.today().isoformat(),
        institution_id=institution_id,
        infrastructure_id=infrastructure_id,
        status=status.value if status else None,
        type=normalize_enum(MAINTENANCE_TYPE_ALIASES, type) if type else None,
        priority=priority.value if priority else None,
        start_date=start_date.isoformat() if start_date else None,
        end_date=end_date.isoformat() if end_date else None,
        overdue=overdue,
    )
    return list_response(records)


@router.get("/stats/dashboard", response_model=ApiResponse)
def get_dashboard(db: Database = Depends(get_db)):
    """
    Resumen para el tablero: totales por estado, abiertos por prioridad,
    por tipo y programados para los próximos 7 días.
    """
    today = maintenance_service.today()
    params = {"today": today.isoformat(), "week": (today + timedelta(days=7)).isoformat()}

    overview = db.fetch_one(
        """
        SELECT
            COUNT(*) AS total,
            COUNT(CASE WHEN status = 'scheduled' THEN 1 END) AS scheduled,
            COUNT(CASE WHEN status = 'in_progress' THEN 1 END) AS in_progress,
            COUNT(CASE WHEN status = 'completed' THEN 1 END) AS completed,
            COUNT(CASE WHEN status = 'cancelled' THEN 1 END) AS cancelled,
            COUNT(CASE WHEN status = 'scheduled' AND scheduled_date < :today THEN 1 END) AS overdue,
            COALESCE(SUM(cost), 0) AS total_cost
        FROM maintenance_records
        """,
        params
    )

    by_priority = db.fetch_many(
        """
        SELECT priority, COUNT(*) AS count
        FROM maintenance_records
        WHERE status IN ('scheduled', 'in_progress')
        GROUP BY priority
        ORDER BY CASE priority
            WHEN 'critical' THEN 1 WHEN 'high' THEN 2 WHEN 'medium' THEN 3 ELSE 4 END
        """
    )

    by_type = db.fetch_many(
        """
        SELECT type, COUNT(*) AS count, COALESCE(SUM(cost), 0) AS total_cost
        FROM maintenance_records
        GROUP BY type
        ORDER BY count DESC
        """
    )

    upcoming = db.fetch_many(
        SELECT_WITH_OWNERS
        + " WHERE m.status = 'scheduled' AND m.scheduled_date BETWEEN :today AND :week"
        + " ORDER BY m.scheduled_date ASC",
        params
    )

    return ApiResponse(data={
        "overview": overview,
        "by_priority": by_priority,
        "by_type": by_type,
        "upcoming": upcoming,
    })


@router.get("/{maintenance_id}", response_model=ApiResponse)
def get_maintenance(
    maintenance_id: int,
    db: Database = Depends(get_db)
):
    """Obtener un mantenimiento con los datos de su institución e infraestructura."""
    record = crud_maintenance.get_detail(db, maintenance_id)
    if not record:
        raise NotFoundException("Mantenimiento no encontrado")
    return ApiResponse(data=record)


@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
def create_maintenance(
    maintenance_in: MaintenanceCreate,
    db: Database = Depends(get_db),
    current_user: Dict[str, Any] = Depends(get_current_user)
):
    """
    Programar un mantenimiento.

    Si solo se envía infrastructure_id, la institución se toma de la
    infraestructura. Los preventivos reciben next_due_date a 6 meses.
    """
    record = maintenance_service.create_maintenance(db, maintenance_in, current_user["id"])
    return ApiResponse(message="Mantenimiento creado exitosamente", data=record)


@router.put("/{maintenance_id}", response_model=ApiResponse)
def update_maintenance(
    maintenance_id: int,
    maintenance_in: MaintenanceUpdate,
    db: Database = Depends(get_db),
    current_user: Dict[str, Any] = Depends(get_current_user)
):
    """Actualizar solo los campos enviados."""
    record = maintenance_service.update_maintenance(db, maintenance_id, maintenance_in)
    return ApiResponse(message="Mantenimiento actualizado exitosamente", data=record)


@router.delete("/{maintenance_id}", response_model=ApiResponse)
def delete_maintenance(
    maintenance_id: int,
    db: Database = Depends(get_db),
    current_user: Dict[str, Any] = Depends(get_current_user)
):
    if not crud_maintenance.remove(db, id=maintenance_id):
        raise NotFoundException("Mantenimiento no encontrado")
    return ApiResponse(message="Mantenimiento eliminado exitosamente")


@router.post("/{maintenance_id}/complete", response_model=ApiResponse)
def complete_maintenance(
    maintenance_id: int,
    complete_in: Optional[MaintenanceComplete] = None,
    db: Database = Depends(get_db),
    current_user: Dict[str, Any] = Depends(get_current_user)
):
    """
    Marcar un mantenimiento como completado hoy.

    Acepta opcionalmente actual_cost y notes.
    """
    record = maintenance_service.complete_maintenance(
        db, maintenance_id, complete_in or MaintenanceComplete()
    )
    return ApiResponse(message="Mantenimiento completado exitosamente", data=record)
