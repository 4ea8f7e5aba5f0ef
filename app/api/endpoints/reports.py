"""
Endpoints de reportes.

Solo lectura: cada llamada recalcula los agregados desde la base de datos.
"""
from datetime import date, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta
from fastapi import APIRouter, Depends, Query

from app.core.deps import get_db
from app.crud.maintenance import SELECT_WITH_OWNERS, build_filters
from app.db.base import STATUS_ACTIVE
from app.db.session import Database
from app.schemas.common import ApiResponse, normalize_enum
from app.schemas.institution import INSTITUTION_TYPE_ALIASES
from app.schemas.maintenance import (
    MAINTENANCE_TYPE_ALIASES,
    MaintenancePriority,
    MaintenanceStatus,
)
from app.services.maintenance_service import today

router = APIRouter()

# Meses incluidos en las series mensuales
TRAILING_MONTHS = 12


def _months_ago(reference: date, months: int) -> str:
    """Primer día del mes `months` meses antes de `reference` (ISO)."""
    return (reference.replace(day=1) - relativedelta(months=months - 1)).isoformat()


@router.get("/dashboard", response_model=ApiResponse)
def get_dashboard_report(db: Database = Depends(get_db)):
    """
    Reporte general del tablero.

    Incluye totales, instituciones por tipo, mantenimientos por mes de los
    últimos 12 meses, las 5 instituciones con más mantenimientos, abiertos
    por prioridad y análisis de costos por tipo.
    """
    current = today()
    params = {
        "active": STATUS_ACTIVE,
        "today": current.isoformat(),
        "since": _months_ago(current, TRAILING_MONTHS),
    }

    general_stats = db.fetch_one(
        """
        SELECT
            (SELECT COUNT(*) FROM institutions WHERE status = :active) AS total_institutions,
            (SELECT COUNT(*) FROM infrastructures WHERE status = :active) AS total_infrastructures,
            (SELECT COUNT(*) FROM maintenance_records) AS total_maintenance,
            (SELECT COUNT(*) FROM maintenance_records WHERE status = 'scheduled') AS pending_maintenance,
            (SELECT COUNT(*) FROM maintenance_records WHERE status = 'completed') AS completed_maintenance,
            (SELECT COUNT(*) FROM maintenance_records
                WHERE status = 'scheduled' AND scheduled_date < :today) AS overdue_maintenance,
            (SELECT COALESCE(SUM(cost), 0) FROM maintenance_records) AS total_cost
        """,
        params
    )

    institution_types = db.fetch_many(
        """
        SELECT type, COUNT(*) AS count, COALESCE(SUM(total_capacity), 0) AS total_capacity
        FROM institutions
        WHERE status = :active
        GROUP BY type
        ORDER BY count DESC
        """,
        params
    )

    maintenance_by_month = db.fetch_many(
        """
        SELECT
            substr(scheduled_date, 1, 7) AS month,
            COUNT(*) AS total,
            COUNT(CASE WHEN status = 'completed' THEN 1 END) AS completed,
            COUNT(CASE WHEN type = 'preventivo' THEN 1 END) AS preventive,
            COUNT(CASE WHEN type = 'correctivo' THEN 1 END) AS corrective,
            COALESCE(SUM(cost), 0) AS total_cost
        FROM maintenance_records
        WHERE scheduled_date >= :since
        GROUP BY month
        ORDER BY month ASC
        """,
        params
    )

    top_institutions = db.fetch_many(
        """
        SELECT i.id, i.name, i.type,
               COUNT(m.id) AS maintenance_count,
               COALESCE(SUM(m.cost), 0) AS total_cost
        FROM institutions i
        LEFT JOIN maintenance_records m ON m.institution_id = i.id
        WHERE i.status = :active
        GROUP BY i.id
        ORDER BY maintenance_count DESC, i.name ASC
        LIMIT 5
        """,
        params
    )

    by_priority = db.fetch_many(
        """
        SELECT priority, COUNT(*) AS count
        FROM maintenance_records
        WHERE status IN ('scheduled', 'in_progress')
        GROUP BY priority
        """
    )

    cost_analysis = db.fetch_many(
        """
        SELECT type,
               COUNT(*) AS count,
               COALESCE(SUM(cost), 0) AS total_cost,
               COALESCE(AVG(cost), 0) AS average_cost
        FROM maintenance_records
        WHERE cost IS NOT NULL
        GROUP BY type
        ORDER BY total_cost DESC
        """
    )

    return ApiResponse(data={
        "general_stats": general_stats,
        "institution_types": institution_types,
        "maintenance_by_month": maintenance_by_month,
        "top_institutions": top_institutions,
        "maintenance_by_priority": by_priority,
        "cost_analysis": cost_analysis,
    })


@router.get("/maintenance", response_model=ApiResponse)
def get_maintenance_report(
    institution_id: Optional[int] = Query(None),
    status: Optional[MaintenanceStatus] = Query(None),
    type: Optional[str] = Query(None),
    priority: Optional[MaintenancePriority] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: Database = Depends(get_db)
):
    """
    Reporte filtrado de mantenimientos con estadísticas del conjunto.
    """
    filters = {
        "institution_id": institution_id,
        "status": status.value if status else None,
        "type": normalize_enum(MAINTENANCE_TYPE_ALIASES, type) if type else None,
        "priority": priority.value if priority else None,
        "start_date": start_date.isoformat() if start_date else None,
        "end_date": end_date.isoformat() if end_date else None,
    }
    where, params = build_filters(today=today().isoformat(), **filters)
    where_sql = (" WHERE " + " AND ".join(where)) if where else ""

    records = db.fetch_many(
        SELECT_WITH_OWNERS + where_sql + " ORDER BY m.scheduled_date DESC, m.id DESC",
        params
    )

    stats = db.fetch_one(
        f"""
        SELECT
            COUNT(*) AS total,
            COUNT(CASE WHEN m.status = 'completed' THEN 1 END) AS completed,
            COUNT(CASE WHEN m.status = 'scheduled' THEN 1 END) AS scheduled,
            COUNT(CASE WHEN m.status = 'in_progress' THEN 1 END) AS in_progress,
            COUNT(CASE WHEN m.status = 'cancelled' THEN 1 END) AS cancelled,
            COALESCE(SUM(m.cost), 0) AS total_cost,
            COALESCE(AVG(m.cost), 0) AS average_cost
        FROM maintenance_records m
        {where_sql}
        """,
        params
    )

    return ApiResponse(
        data={
            "records": records,
            "stats": stats,
            "filters": {key: value for key, value in filters.items() if value is not None},
        },
        count=len(records),
    )


@router.get("/institutions", response_model=ApiResponse)
def get_institutions_report(
    type: Optional[str] = Query(None),
    db: Database = Depends(get_db)
):
    """
    Reporte de instituciones activas.

    Cada institución incluye conteo de infraestructuras y totales de
    mantenimiento; `summary` suma capacidades y promedia edificios y aulas.
    """
    where = "WHERE i.status = :active"
    params = {"active": STATUS_ACTIVE}

    institution_type = normalize_enum(INSTITUTION_TYPE_ALIASES, type) if type else None
    if institution_type:
        where += " AND i.type = :type"
        params["type"] = institution_type

    institutions = db.fetch_many(
        f"""
        SELECT i.*,
               (SELECT COUNT(*) FROM infrastructures inf
                    WHERE inf.institution_id = i.id AND inf.status = :active) AS infrastructure_count,
               COUNT(m.id) AS maintenance_count,
               COUNT(CASE WHEN m.status = 'scheduled' THEN 1 END) AS pending_maintenance,
               COUNT(CASE WHEN m.status = 'completed' THEN 1 END) AS completed_maintenance,
               AVG(m.cost) AS avg_maintenance_cost,
               COALESCE(SUM(m.cost), 0) AS total_maintenance_cost,
               MAX(m.completed_date) AS last_maintenance_date
        FROM institutions i
        LEFT JOIN maintenance_records m ON m.institution_id = i.id
        {where}
        GROUP BY i.id
        ORDER BY i.name ASC
        """,
        params
    )

    summary = db.fetch_one(
        f"""
        SELECT
            COUNT(*) AS total_institutions,
            COALESCE(SUM(i.buildings_count), 0) AS total_buildings,
            COALESCE(SUM(i.classrooms_count), 0) AS total_classrooms,
            COALESCE(SUM(i.laboratories_count), 0) AS total_laboratories,
            COALESCE(SUM(i.total_capacity), 0) AS total_capacity,
            AVG(i.buildings_count) AS avg_buildings,
            AVG(i.classrooms_count) AS avg_classrooms
        FROM institutions i
        {where}
        """,
        params
    )

    return ApiResponse(
        data={
            "institutions": institutions,
            "summary": summary,
            "filters": {"type": institution_type} if institution_type else {},
        },
        count=len(institutions),
    )


@router.get("/upcoming-maintenance", response_model=ApiResponse)
def get_upcoming_maintenance(
    days: int = Query(30, ge=1, le=365, description="Ventana en días"),
    db: Database = Depends(get_db)
):
    """
    Mantenimientos programados para los próximos `days` días y los ya
    vencidos (programados con fecha anterior a hoy).
    """
    current = today()
    params = {"today": current.isoformat(), "until": (current + timedelta(days=days)).isoformat()}

    upcoming = db.fetch_many(
        SELECT_WITH_OWNERS
        + " WHERE m.status = 'scheduled' AND m.scheduled_date BETWEEN :today AND :until"
        + " ORDER BY m.scheduled_date ASC",
        params
    )
    for item in upcoming:
        item["days_until"] = (date.fromisoformat(item["scheduled_date"]) - current).days

    overdue = db.fetch_many(
        SELECT_WITH_OWNERS
        + " WHERE m.status = 'scheduled' AND m.scheduled_date < :today"
        + " ORDER BY m.scheduled_date ASC",
        params
    )
    for item in overdue:
        item["days_overdue"] = (current - date.fromisoformat(item["scheduled_date"])).days

    return ApiResponse(data={
        "upcoming": upcoming,
        "overdue": overdue,
        "summary": {
            "days": days,
            "upcoming_count": len(upcoming),
            "overdue_count": len(overdue),
            "critical_upcoming": sum(1 for item in upcoming if item["priority"] == "critical"),
            "high_priority_upcoming": sum(1 for item in upcoming if item["priority"] == "high"),
        },
    })


@router.get("/cost-analysis", response_model=ApiResponse)
def get_cost_analysis(
    start_date: Optional[date] = Query(None, description="Programados desde"),
    end_date: Optional[date] = Query(None, description="Programados hasta"),
    institution_id: Optional[int] = Query(None),
    db: Database = Depends(get_db)
):
    """
    Costos de mantenimiento: resumen con totales por tipo, por institución
    y por mes. Solo cuentan los registros con costo mayor que cero.
    """
    filters = {
        "start_date": start_date.isoformat() if start_date else None,
        "end_date": end_date.isoformat() if end_date else None,
        "institution_id": institution_id,
    }
    where, params = build_filters(today=today().isoformat(), **filters)
    where_sql = " AND ".join(["m.cost IS NOT NULL", "m.cost > 0", *where])

    summary = db.fetch_one(
        f"""
        SELECT
            COUNT(*) AS total_records,
            AVG(m.cost) AS avg_cost,
            MIN(m.cost) AS min_cost,
            MAX(m.cost) AS max_cost,
            COALESCE(SUM(m.cost), 0) AS total_cost,
            COALESCE(SUM(CASE WHEN m.type = 'preventivo' THEN m.cost END), 0) AS preventive_total,
            COALESCE(SUM(CASE WHEN m.type = 'correctivo' THEN m.cost END), 0) AS corrective_total,
            COALESCE(SUM(CASE WHEN m.type = 'predictivo' THEN m.cost END), 0) AS predictive_total,
            COALESCE(SUM(CASE WHEN m.type = 'emergencia' THEN m.cost END), 0) AS emergency_total
        FROM maintenance_records m
        WHERE {where_sql}
        """,
        params
    )

    by_institution = db.fetch_many(
        f"""
        SELECT i.id AS institution_id,
               i.name AS institution_name,
               i.type AS institution_type,
               COUNT(m.id) AS maintenance_count,
               AVG(m.cost) AS avg_cost,
               SUM(m.cost) AS total_cost
        FROM maintenance_records m
        LEFT JOIN institutions i ON m.institution_id = i.id
        WHERE {where_sql}
        GROUP BY i.id
        ORDER BY total_cost DESC
        """,
        params
    )

    by_month = db.fetch_many(
        f"""
        SELECT substr(m.scheduled_date, 1, 7) AS month,
               COUNT(*) AS maintenance_count,
               AVG(m.cost) AS avg_cost,
               SUM(m.cost) AS total_cost
        FROM maintenance_records m
        WHERE {where_sql}
        GROUP BY month
        ORDER BY month ASC
        """,
        params
    )

    return ApiResponse(data={
        "summary": summary,
        "by_institution": by_institution,
        "by_month": by_month,
        "filters": {key: value for key, value in filters.items() if value is not None},
    })
