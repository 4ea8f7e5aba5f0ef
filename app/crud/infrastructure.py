"""
CRUD de infraestructuras.
"""
from typing import Any, Dict, List, Optional

from app.crud.base import CRUDBase
from app.db.base import STATUS_ACTIVE
from app.db.session import Database

SELECT_WITH_INSTITUTION = """
    SELECT i.*, inst.name AS institution_name, inst.type AS institution_type
    FROM infrastructures i
    LEFT JOIN institutions inst ON i.institution_id = inst.id
"""


class CRUDInfrastructure(CRUDBase):
    """Operaciones sobre la tabla infrastructures."""

    def get_multi(
        self,
        db: Database,
        *,
        institution_id: Optional[int] = None,
        type: Optional[str] = None,
        status: str = STATUS_ACTIVE,
        search: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Listar infraestructuras con el nombre de su institución."""
        query = SELECT_WITH_INSTITUTION + " WHERE i.status = :status"
        params: Dict[str, Any] = {"status": status}

        if institution_id:
            query += " AND i.institution_id = :institution_id"
            params["institution_id"] = institution_id

        if type:
            query += " AND i.type = :type"
            params["type"] = type

        if search:
            query += " AND (i.name LIKE :search OR i.location LIKE :search)"
            params["search"] = f"%{search}%"

        query += " ORDER BY inst.name ASC, i.name ASC"
        return db.fetch_many(query, params)

    def get_detail(
        self, db: Database, id: int, include_deleted: bool = False
    ) -> Optional[Dict[str, Any]]:
        """Infraestructura con datos de su institución."""
        query = SELECT_WITH_INSTITUTION + " WHERE i.id = :id"
        params: Dict[str, Any] = {"id": id}
        if not include_deleted:
            query += " AND i.status = :status"
            params["status"] = STATUS_ACTIVE
        return db.fetch_one(query, params)

    def maintenance_history(self, db: Database, infrastructure_id: int) -> List[Dict[str, Any]]:
        """Todos los mantenimientos de la infraestructura."""
        return db.fetch_many(
            "SELECT * FROM maintenance_records WHERE infrastructure_id = :id "
            "ORDER BY scheduled_date DESC",
            {"id": infrastructure_id}
        )


infrastructure = CRUDInfrastructure(
    "infrastructures",
    (
        "institution_id", "name", "type", "location", "capacity", "area_m2",
        "construction_year", "condition_status", "description",
    ),
)
