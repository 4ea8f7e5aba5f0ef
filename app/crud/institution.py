"""
CRUD de instituciones.
"""
from typing import Any, Dict, List, Optional

from app.crud.base import CRUDBase
from app.db.base import STATUS_ACTIVE
from app.db.session import Database

MAINTENANCE_STATS_SQL = """
    SELECT
        COUNT(*) AS total_maintenance,
        COUNT(CASE WHEN status = 'scheduled' THEN 1 END) AS pending_maintenance,
        COUNT(CASE WHEN status = 'completed' THEN 1 END) AS completed_maintenance,
        MAX(completed_date) AS last_maintenance,
        MIN(CASE WHEN status = 'scheduled' THEN scheduled_date END) AS next_maintenance
    FROM maintenance_records
    WHERE institution_id = :institution_id
"""


class CRUDInstitution(CRUDBase):
    """Operaciones sobre la tabla institutions."""

    def get_multi(
        self,
        db: Database,
        *,
        type: Optional[str] = None,
        status: str = STATUS_ACTIVE,
        search: Optional[str] = None,
        created_from: Optional[str] = None,
        created_to: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Listar instituciones filtradas, ordenadas por nombre."""
        where = ["status = :status"]
        params: Dict[str, Any] = {"status": status}

        if type:
            where.append("type = :type")
            params["type"] = type

        if search:
            where.append("(name LIKE :search OR location LIKE :search OR acronym LIKE :search)")
            params["search"] = f"%{search}%"

        if created_from:
            where.append("date(created_at) >= :created_from")
            params["created_from"] = created_from

        if created_to:
            where.append("date(created_at) <= :created_to")
            params["created_to"] = created_to

        return self.list_where(db, where, params, order_by="name ASC")

    def get_by_name(self, db: Database, name: str) -> Optional[Dict[str, Any]]:
        """Buscar por nombre exacto (incluye eliminadas)."""
        return db.fetch_one("SELECT id FROM institutions WHERE name = :name", {"name": name})

    def maintenance_stats(self, db: Database, institution_id: int) -> Dict[str, Any]:
        """Resumen de mantenimientos de una institución."""
        return db.fetch_one(MAINTENANCE_STATS_SQL, {"institution_id": institution_id})

    def infrastructures(self, db: Database, institution_id: int) -> List[Dict[str, Any]]:
        """Infraestructuras activas de la institución."""
        return db.fetch_many(
            "SELECT * FROM infrastructures WHERE institution_id = :id AND status = :status "
            "ORDER BY name ASC",
            {"id": institution_id, "status": STATUS_ACTIVE}
        )

    def maintenance_history(
        self, db: Database, institution_id: int, limit: int = 10
    ) -> List[Dict[str, Any]]:
        """Últimos mantenimientos de la institución."""
        return db.fetch_many(
            "SELECT * FROM maintenance_records WHERE institution_id = :id "
            "ORDER BY scheduled_date DESC LIMIT :limit",
            {"id": institution_id, "limit": limit}
        )

    def summary(self, db: Database) -> Dict[str, Any]:
        """Conteos por tipo y sumas de capacidad de las instituciones activas."""
        return db.fetch_one(
            """
            SELECT
                COUNT(*) AS total_institutions,
                COUNT(CASE WHEN type = 'universidad' THEN 1 END) AS universities,
                COUNT(CASE WHEN type = 'colegio' THEN 1 END) AS colleges,
                COUNT(CASE WHEN type = 'escuela' THEN 1 END) AS schools,
                COUNT(CASE WHEN type = 'instituto' THEN 1 END) AS institutes,
                COALESCE(SUM(buildings_count), 0) AS total_buildings,
                COALESCE(SUM(classrooms_count), 0) AS total_classrooms,
                COALESCE(SUM(laboratories_count), 0) AS total_laboratories,
                COALESCE(SUM(total_capacity), 0) AS total_capacity
            FROM institutions WHERE status = :status
            """,
            {"status": STATUS_ACTIVE}
        )


institution = CRUDInstitution(
    "institutions",
    (
        "name", "type", "acronym", "location", "address", "phone", "email", "website",
        "buildings_count", "classrooms_count", "laboratories_count", "total_capacity",
        "created_by",
    ),
)
