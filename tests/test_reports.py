"""
Tests de reportes.
"""
from datetime import date, timedelta

import pytest

from app.crud.infrastructure import infrastructure as crud_infrastructure
from app.crud.institution import institution as crud_institution
from app.crud.maintenance import maintenance as crud_maintenance


@pytest.fixture
def report_data(db, test_institution):
    """Una institución extra y mantenimientos en distintos estados."""
    today = date.today()
    school = crud_institution.create(db, obj_in={
        "name": "Escuela Fiscal Mixta 5",
        "type": "escuela",
        "location": "Manta",
        "classrooms_count": 6,
        "total_capacity": 180,
    })
    crud_infrastructure.create(db, obj_in={
        "institution_id": test_institution["id"],
        "name": "Bloque central",
        "type": "edificio",
    })
    records = [
        (test_institution["id"], "preventivo", "scheduled", "critical", today + timedelta(days=5), 200.0),
        (test_institution["id"], "correctivo", "completed", "medium", today - timedelta(days=20), 850.0),
        (test_institution["id"], "correctivo", "scheduled", "high", today - timedelta(days=3), None),
        (school["id"], "emergencia", "completed", "high", today - timedelta(days=40), 1500.0),
    ]
    for institution_id, type_, status, priority, scheduled, cost in records:
        crud_maintenance.create(db, obj_in={
            "institution_id": institution_id,
            "type": type_,
            "title": f"{type_} {status}",
            "status": status,
            "priority": priority,
            "scheduled_date": scheduled.isoformat(),
            "completed_date": scheduled.isoformat() if status == "completed" else None,
            "cost": cost,
        })
    return {"school": school, "today": today}


async def test_dashboard(client, report_data):
    response = await client.get("/api/reports/dashboard")

    assert response.status_code == 200
    data = response.json()["data"]
    stats = data["general_stats"]
    assert stats["total_institutions"] == 2
    assert stats["total_maintenance"] == 4
    assert stats["completed_maintenance"] == 2
    assert stats["overdue_maintenance"] == 1
    assert stats["total_cost"] == 2550.0

    assert {row["type"] for row in data["institution_types"]} == {"colegio", "escuela"}
    assert sum(row["total"] for row in data["maintenance_by_month"]) == 4
    assert data["top_institutions"][0]["maintenance_count"] == 3
    assert len(data["top_institutions"]) <= 5


async def test_maintenance_report_filters(client, report_data):
    response = await client.get("/api/reports/maintenance", params={"status": "completed"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert response.json()["count"] == 2
    assert data["stats"]["total"] == 2
    assert data["stats"]["total_cost"] == 2350.0
    assert data["filters"] == {"status": "completed"}


async def test_institutions_report(client, report_data, test_institution):
    response = await client.get("/api/reports/institutions")

    assert response.status_code == 200
    data = response.json()["data"]
    rows = {row["id"]: row for row in data["institutions"]}
    colegio = rows[test_institution["id"]]
    assert colegio["infrastructure_count"] == 1
    assert colegio["maintenance_count"] == 3
    assert colegio["pending_maintenance"] == 2
    assert colegio["total_maintenance_cost"] == 1050.0
    assert colegio["avg_maintenance_cost"] == 525.0
    assert colegio["last_maintenance_date"] == (report_data["today"] - timedelta(days=20)).isoformat()
    assert data["summary"]["total_institutions"] == 2
    assert data["filters"] == {}


async def test_institutions_report_by_type(client, report_data):
    response = await client.get("/api/reports/institutions", params={"type": "school"})

    data = response.json()["data"]
    assert [row["name"] for row in data["institutions"]] == ["Escuela Fiscal Mixta 5"]
    assert data["institutions"][0]["total_maintenance_cost"] == 1500.0
    assert data["summary"]["total_classrooms"] == 6
    assert data["summary"]["total_capacity"] == 180
    assert data["summary"]["avg_classrooms"] == 6.0
    assert data["filters"] == {"type": "escuela"}


async def test_upcoming_and_overdue(client, report_data):
    response = await client.get("/api/reports/upcoming-maintenance", params={"days": 7})

    assert response.status_code == 200
    data = response.json()["data"]
    assert [row["days_until"] for row in data["upcoming"]] == [5]
    assert [row["days_overdue"] for row in data["overdue"]] == [3]
    assert data["summary"] == {
        "days": 7,
        "upcoming_count": 1,
        "overdue_count": 1,
        "critical_upcoming": 1,
        "high_priority_upcoming": 0,
    }


async def test_cost_analysis(client, report_data):
    response = await client.get("/api/reports/cost-analysis")

    assert response.status_code == 200
    data = response.json()["data"]
    summary = data["summary"]
    assert summary["total_records"] == 3
    assert summary["total_cost"] == 2550.0
    assert summary["preventive_total"] == 200.0
    assert summary["corrective_total"] == 850.0
    assert summary["predictive_total"] == 0
    assert summary["emergency_total"] == 1500.0
    assert data["by_institution"][0]["institution_name"] == "Escuela Fiscal Mixta 5"
    assert sum(row["maintenance_count"] for row in data["by_month"]) == 3
    assert data["filters"] == {}


async def test_cost_analysis_filters(client, report_data, test_institution):
    start = (report_data["today"] - timedelta(days=30)).isoformat()

    response = await client.get(
        "/api/reports/cost-analysis",
        params={"start_date": start, "institution_id": test_institution["id"]},
    )

    data = response.json()["data"]
    assert data["summary"]["total_records"] == 2
    assert data["summary"]["total_cost"] == 1050.0
    assert [row["institution_id"] for row in data["by_institution"]] == [test_institution["id"]]
    assert data["filters"] == {"start_date": start, "institution_id": test_institution["id"]}


async def test_empty_store(client, db):
    response = await client.get("/api/reports/dashboard")

    assert response.status_code == 200
    assert response.json()["data"]["general_stats"]["total_maintenance"] == 0
