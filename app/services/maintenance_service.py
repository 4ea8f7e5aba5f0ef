"""
Servicio de mantenimientos.
Reglas de negocio: dueño del registro, próxima fecha para preventivos y
cierre de mantenimientos.
"""
import logging
from datetime import date
from typing import Any, Dict, Optional

from dateutil.relativedelta import relativedelta

from app.core.exceptions import NotFoundException, ValidationException
from app.crud.infrastructure import infrastructure as crud_infrastructure
from app.crud.institution import institution as crud_institution
from app.crud.maintenance import maintenance as crud_maintenance
from app.db.session import Database
from app.schemas.maintenance import (
    OWNER_REQUIRED_MESSAGE,
    MaintenanceComplete,
    MaintenanceCreate,
    MaintenanceStatus,
    MaintenanceType,
    MaintenanceUpdate,
)

logger = logging.getLogger(__name__)

# Meses entre mantenimientos preventivos
PREVENTIVE_INTERVAL_MONTHS = 6


def today() -> date:
    """Fecha actual (punto único para comparar vencimientos)."""
    return date.today()


def compute_next_due_date(maintenance_type: str, base_date: date) -> Optional[date]:
    """
    Próxima fecha de mantenimiento.

    Solo los preventivos tienen próxima fecha: base + 6 meses calendario
    (el día se ajusta al último del mes si no existe).
    """
    if maintenance_type != MaintenanceType.preventivo.value:
        return None
    return base_date + relativedelta(months=PREVENTIVE_INTERVAL_MONTHS)


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def _check_owners(
    db: Database, institution_id: Optional[int], infrastructure_id: Optional[int]
) -> Optional[int]:
    """
    Validar institución/infraestructura y devolver la institución efectiva.

    Si solo llega la infraestructura, la institución se toma de ella.
    """
    if infrastructure_id is not None:
        infra = crud_infrastructure.get(db, infrastructure_id)
        if not infra:
            raise NotFoundException("Infraestructura no encontrada")
        if institution_id is None:
            institution_id = infra["institution_id"]

    if institution_id is not None and not crud_institution.exists(db, institution_id):
        raise NotFoundException("Institución no encontrada")

    return institution_id


def create_maintenance(
    db: Database, data: MaintenanceCreate, user_id: Optional[int] = None
) -> Dict[str, Any]:
    """Crear un mantenimiento programado."""
    institution_id = _check_owners(db, data.institution_id, data.infrastructure_id)

    row = data.model_dump(mode="json")
    row["institution_id"] = institution_id
    row["next_due_date"] = _iso(compute_next_due_date(data.type.value, data.scheduled_date))
    row["status"] = MaintenanceStatus.scheduled.value
    row["created_by"] = user_id

    created = crud_maintenance.create(db, obj_in=row)
    logger.info(f"Mantenimiento creado: {created['id']} ({data.type.value})")
    return crud_maintenance.get_detail(db, created["id"])


def update_maintenance(db: Database, id: int, data: MaintenanceUpdate) -> Dict[str, Any]:
    """
    Actualización parcial: solo se escriben los campos enviados.

    Pasar a 'completed' sin completed_date sella la fecha de hoy.
    """
    existing = crud_maintenance.get(db, id)
    if not existing:
        raise NotFoundException("Mantenimiento no encontrado")

    updates = data.model_dump(mode="json", exclude_unset=True)

    if "institution_id" in updates or "infrastructure_id" in updates:
        infrastructure_id = updates.get("infrastructure_id", existing["infrastructure_id"])
        if "institution_id" in updates:
            institution_id = updates["institution_id"]
        elif infrastructure_id is not None:
            # Nueva infraestructura sin institución explícita: se toma de ella
            institution_id = None
        else:
            institution_id = existing["institution_id"]

        if institution_id is None and infrastructure_id is None:
            raise ValidationException(
                errors=[{"field": "institution_id", "message": OWNER_REQUIRED_MESSAGE}]
            )

        updates["institution_id"] = _check_owners(db, institution_id, infrastructure_id)
        updates["infrastructure_id"] = infrastructure_id

    if updates.get("status") == MaintenanceStatus.completed.value and not updates.get("completed_date"):
        updates["completed_date"] = today().isoformat()

    if updates:
        crud_maintenance.update(db, id=id, obj_in=updates)
    return crud_maintenance.get_detail(db, id)


def complete_maintenance(db: Database, id: int, data: MaintenanceComplete) -> Dict[str, Any]:
    """
    Marcar como completado hoy.

    El costo y las notas solo se reemplazan si se envían. Para preventivos
    la próxima fecha pasa a ser hoy + 6 meses; para el resto queda vacía.
    """
    existing = crud_maintenance.get(db, id)
    if not existing:
        raise NotFoundException("Mantenimiento no encontrado")

    completed = today()
    updates: Dict[str, Any] = {
        "status": MaintenanceStatus.completed.value,
        "completed_date": completed.isoformat(),
        "next_due_date": _iso(compute_next_due_date(existing["type"], completed)),
    }
    if data.actual_cost is not None:
        updates["cost"] = data.actual_cost
    if data.notes is not None:
        updates["notes"] = data.notes

    crud_maintenance.update(db, id=id, obj_in=updates)
    logger.info(f"Mantenimiento completado: {id}")
    return crud_maintenance.get_detail(db, id)
