"""
CRUD de registros de mantenimiento.
"""
from typing import Any, Dict, List, Optional

from app.crud.base import CRUDBase
from app.db.session import Database

SELECT_WITH_OWNERS = """
    SELECT m.*,
           i.name AS institution_name, i.type AS institution_type,
           inf.name AS infrastructure_name, inf.type AS infrastructure_type
    FROM maintenance_records m
    LEFT JOIN institutions i ON m.institution_id = i.id
    LEFT JOIN infrastructures inf ON m.infrastructure_id = inf.id
"""


def build_filters(
    *,
    today: str,
    institution_id: Optional[int] = None,
    infrastructure_id: Optional[int] = None,
    status: Optional[str] = None,
    type: Optional[str] = None,
    priority: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    overdue: bool = False
) -> tuple[List[str], Dict[str, Any]]:
    """
    Condiciones WHERE (alias m) y parámetros para filtrar mantenimientos.

    Compartido por el listado y por el reporte de mantenimientos.
    """
    where: List[str] = []
    params: Dict[str, Any] = {}

    if institution_id:
        where.append("m.institution_id = :institution_id")
        params["institution_id"] = institution_id

    if infrastructure_id:
        where.append("m.infrastructure_id = :infrastructure_id")
        params["infrastructure_id"] = infrastructure_id

    if status:
        where.append("m.status = :status")
        params["status"] = status

    if type:
        where.append("m.type = :type")
        params["type"] = type

    if priority:
        where.append("m.priority = :priority")
        params["priority"] = priority

    if start_date:
        where.append("m.scheduled_date >= :start_date")
        params["start_date"] = start_date

    if end_date:
        where.append("m.scheduled_date <= :end_date")
        params["end_date"] = end_date

    if overdue:
        where.append("m.status = 'scheduled' AND m.scheduled_date < :today")
        params["today"] = today

    return where, params


class CRUDMaintenance(CRUDBase):
    """Operaciones sobre la tabla maintenance_records (borrado físico)."""

    def get_multi(self, db: Database, **filters: Any) -> List[Dict[str, Any]]:
        """Listar mantenimientos con nombres de institución e infraestructura."""
        where, params = build_filters(**filters)
        query = SELECT_WITH_OWNERS
        if where:
            query += " WHERE " + " AND ".join(where)
        query += " ORDER BY m.scheduled_date DESC, m.id DESC"
        return db.fetch_many(query, params)

    def get_detail(self, db: Database, id: int) -> Optional[Dict[str, Any]]:
        """Mantenimiento con nombres y tipos de sus dueños."""
        return db.fetch_one(SELECT_WITH_OWNERS + " WHERE m.id = :id", {"id": id})


maintenance = CRUDMaintenance(
    "maintenance_records",
    (
        "institution_id", "infrastructure_id", "type", "title", "description",
        "scheduled_date", "completed_date", "next_due_date", "priority", "status",
        "cost", "contractor", "notes", "created_by",
    ),
    soft_delete=False,
)
