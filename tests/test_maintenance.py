"""
Tests de endpoints y reglas de mantenimiento.
"""
from datetime import date, timedelta

import pytest
from dateutil.relativedelta import relativedelta

from app.crud.infrastructure import infrastructure as crud_infrastructure
from app.crud.institution import institution as crud_institution
from app.crud.maintenance import maintenance as crud_maintenance
from app.services.maintenance_service import compute_next_due_date


@pytest.fixture
def test_infrastructure(db, test_institution):
    return crud_infrastructure.create(db, obj_in={
        "institution_id": test_institution["id"],
        "name": "Bloque B",
        "type": "edificio",
    })


@pytest.fixture
def maintenance_payload(test_institution):
    return {
        "institution_id": test_institution["id"],
        "type": "preventivo",
        "title": "Revisión eléctrica",
        "scheduled_date": "2025-02-20",
        "priority": "high",
    }


class TestNextDueDate:
    """Cálculo de la próxima fecha de mantenimiento."""

    def test_preventive_adds_six_months(self):
        assert compute_next_due_date("preventivo", date(2025, 2, 20)) == date(2025, 8, 20)

    def test_end_of_month_is_clamped(self):
        assert compute_next_due_date("preventivo", date(2025, 8, 31)) == date(2026, 2, 28)

    def test_other_types_have_none(self):
        assert compute_next_due_date("correctivo", date(2025, 2, 20)) is None


class TestCreateMaintenance:
    """Tests de creación."""

    async def test_preventive_gets_next_due_date(self, client, auth_headers, maintenance_payload):
        response = await client.post("/api/maintenance", json=maintenance_payload, headers=auth_headers)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["status"] == "scheduled"
        assert data["next_due_date"] == "2025-08-20"
        assert data["institution_name"]

    async def test_english_type_alias(self, client, auth_headers, maintenance_payload):
        payload = {**maintenance_payload, "type": "corrective"}

        response = await client.post("/api/maintenance", json=payload, headers=auth_headers)

        assert response.status_code == 201
        assert response.json()["data"]["type"] == "correctivo"
        assert response.json()["data"]["next_due_date"] is None

    async def test_requires_owner(self, client, auth_headers, maintenance_payload):
        payload = {key: value for key, value in maintenance_payload.items() if key != "institution_id"}

        response = await client.post("/api/maintenance", json=payload, headers=auth_headers)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["errors"][0]["message"] == "Debe especificar al menos una institución o infraestructura"

        listing = await client.get("/api/maintenance")
        assert listing.json()["count"] == 0

    async def test_institution_inferred_from_infrastructure(
        self, client, auth_headers, maintenance_payload, test_infrastructure
    ):
        payload = {**maintenance_payload, "infrastructure_id": test_infrastructure["id"]}
        del payload["institution_id"]

        response = await client.post("/api/maintenance", json=payload, headers=auth_headers)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["institution_id"] == test_infrastructure["institution_id"]
        assert data["infrastructure_name"] == "Bloque B"

    async def test_unknown_infrastructure(self, client, auth_headers, maintenance_payload):
        payload = {**maintenance_payload, "infrastructure_id": 999}

        response = await client.post("/api/maintenance", json=payload, headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "Infraestructura no encontrada"

    async def test_invalid_values(self, client, auth_headers, maintenance_payload):
        payload = {**maintenance_payload, "priority": "urgent", "scheduled_date": "20-02-2025"}

        response = await client.post("/api/maintenance", json=payload, headers=auth_headers)

        assert response.status_code == 400
        fields = {error["field"] for error in response.json()["errors"]}
        assert fields == {"priority", "scheduled_date"}


class TestListMaintenance:
    """Tests de listado y filtros."""

    async def test_overdue_filter(self, client, db, test_institution):
        today = date.today()
        rows = [
            ("Vencido", "scheduled", today - timedelta(days=10)),
            ("Futuro", "scheduled", today + timedelta(days=10)),
            ("Completado antiguo", "completed", today - timedelta(days=30)),
            ("En progreso antiguo", "in_progress", today - timedelta(days=5)),
        ]
        for title, status, scheduled in rows:
            crud_maintenance.create(db, obj_in={
                "institution_id": test_institution["id"],
                "type": "correctivo",
                "title": title,
                "status": status,
                "scheduled_date": scheduled.isoformat(),
            })

        response = await client.get("/api/maintenance", params={"overdue": "true"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert [item["title"] for item in data] == ["Vencido"]
        assert all(
            item["status"] == "scheduled" and item["scheduled_date"] < today.isoformat()
            for item in data
        )

    async def test_filters(self, client, auth_headers, maintenance_payload):
        await client.post("/api/maintenance", json=maintenance_payload, headers=auth_headers)
        await client.post(
            "/api/maintenance",
            json={**maintenance_payload, "type": "emergencia", "priority": "critical", "scheduled_date": "2025-06-01"},
            headers=auth_headers,
        )

        by_type = await client.get("/api/maintenance", params={"type": "emergency"})
        by_priority = await client.get("/api/maintenance", params={"priority": "high"})
        by_range = await client.get(
            "/api/maintenance", params={"start_date": "2025-05-01", "end_date": "2025-12-31"}
        )
        everything = await client.get("/api/maintenance")

        assert [item["type"] for item in by_type.json()["data"]] == ["emergencia"]
        assert [item["priority"] for item in by_priority.json()["data"]] == ["high"]
        assert by_range.json()["count"] == 1
        assert [item["scheduled_date"] for item in everything.json()["data"]] == ["2025-06-01", "2025-02-20"]

    async def test_dashboard(self, client, db, test_institution):
        today = date.today()
        crud_maintenance.create(db, obj_in={
            "institution_id": test_institution["id"],
            "type": "preventivo",
            "title": "Esta semana",
            "priority": "critical",
            "scheduled_date": (today + timedelta(days=3)).isoformat(),
            "cost": 100.0,
        })

        response = await client.get("/api/maintenance/stats/dashboard")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["overview"]["total"] == 1
        assert data["overview"]["scheduled"] == 1
        assert data["by_priority"] == [{"priority": "critical", "count": 1}]
        assert [item["title"] for item in data["upcoming"]] == ["Esta semana"]


class TestUpdateMaintenance:
    """Tests de actualización parcial."""

    async def test_partial_update(self, client, auth_headers, maintenance_payload):
        created = await client.post("/api/maintenance", json=maintenance_payload, headers=auth_headers)
        maintenance_id = created.json()["data"]["id"]

        response = await client.put(
            f"/api/maintenance/{maintenance_id}",
            json={"status": "in_progress", "contractor": "Electro Manta S.A."},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "in_progress"
        assert data["contractor"] == "Electro Manta S.A."
        assert data["title"] == "Revisión eléctrica"
        assert data["priority"] == "high"

    async def test_unknown_fields_are_ignored(self, client, auth_headers, maintenance_payload):
        created = await client.post("/api/maintenance", json=maintenance_payload, headers=auth_headers)
        maintenance_id = created.json()["data"]["id"]

        response = await client.put(
            f"/api/maintenance/{maintenance_id}",
            json={"id": 500, "created_by": 42, "title": "Nuevo título"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == maintenance_id
        assert data["title"] == "Nuevo título"
        assert data["created_by"] != 42

    async def test_completed_status_stamps_date(self, client, auth_headers, maintenance_payload):
        created = await client.post("/api/maintenance", json=maintenance_payload, headers=auth_headers)
        maintenance_id = created.json()["data"]["id"]

        response = await client.put(
            f"/api/maintenance/{maintenance_id}", json={"status": "completed"}, headers=auth_headers
        )

        assert response.json()["data"]["completed_date"] == date.today().isoformat()

    async def test_cannot_remove_both_owners(self, client, auth_headers, maintenance_payload, test_institution):
        created = await client.post("/api/maintenance", json=maintenance_payload, headers=auth_headers)
        maintenance_id = created.json()["data"]["id"]

        response = await client.put(
            f"/api/maintenance/{maintenance_id}",
            json={"institution_id": None, "infrastructure_id": None},
            headers=auth_headers,
        )

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Errores de validación"
        assert body["errors"] == [{
            "field": "institution_id",
            "message": "Debe especificar al menos una institución o infraestructura",
        }]

        stored = await client.get(f"/api/maintenance/{maintenance_id}")
        assert stored.json()["data"]["institution_id"] == test_institution["id"]

    async def test_removing_institution_keeps_infrastructure_owner(
        self, client, auth_headers, maintenance_payload, test_infrastructure
    ):
        payload = {**maintenance_payload, "infrastructure_id": test_infrastructure["id"]}
        created = await client.post("/api/maintenance", json=payload, headers=auth_headers)
        maintenance_id = created.json()["data"]["id"]

        response = await client.put(
            f"/api/maintenance/{maintenance_id}", json={"institution_id": None}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["institution_id"] == test_infrastructure["institution_id"]

    async def test_new_infrastructure_reassigns_institution(
        self, client, db, auth_headers, maintenance_payload
    ):
        other = crud_institution.create(db, obj_in={
            "name": "Instituto Tecnológico Superior Manta",
            "type": "instituto",
            "location": "Manta",
        })
        other_infrastructure = crud_infrastructure.create(db, obj_in={
            "institution_id": other["id"],
            "name": "Taller mecánico",
            "type": "taller",
        })
        created = await client.post("/api/maintenance", json=maintenance_payload, headers=auth_headers)
        maintenance_id = created.json()["data"]["id"]

        response = await client.put(
            f"/api/maintenance/{maintenance_id}",
            json={"infrastructure_id": other_infrastructure["id"]},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["infrastructure_id"] == other_infrastructure["id"]
        assert data["institution_id"] == other["id"]

    async def test_required_fields_cannot_be_null(self, client, auth_headers, maintenance_payload):
        created = await client.post("/api/maintenance", json=maintenance_payload, headers=auth_headers)
        maintenance_id = created.json()["data"]["id"]

        response = await client.put(
            f"/api/maintenance/{maintenance_id}",
            json={"title": None, "type": None, "priority": None, "status": None},
            headers=auth_headers,
        )

        assert response.status_code == 400
        errors = response.json()["errors"]
        assert {error["field"] for error in errors} == {"title", "type", "priority", "status"}
        assert all(error["message"] == "Este campo no puede ser nulo" for error in errors)

        stored = await client.get(f"/api/maintenance/{maintenance_id}")
        assert stored.json()["data"]["title"] == "Revisión eléctrica"

    async def test_update_missing(self, client, auth_headers):
        response = await client.put("/api/maintenance/999", json={"title": "x"}, headers=auth_headers)

        assert response.status_code == 404


class TestCompleteMaintenance:
    """Tests de la operación de completar."""

    async def test_complete_preventive(self, client, auth_headers, maintenance_payload):
        created = await client.post("/api/maintenance", json=maintenance_payload, headers=auth_headers)
        maintenance_id = created.json()["data"]["id"]

        response = await client.post(
            f"/api/maintenance/{maintenance_id}/complete",
            json={"actual_cost": 1250.75, "notes": "Tableros revisados"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        today = date.today()
        assert data["status"] == "completed"
        assert data["completed_date"] == today.isoformat()
        assert data["next_due_date"] == (today + relativedelta(months=6)).isoformat()
        assert data["cost"] == 1250.75
        assert data["notes"] == "Tableros revisados"

    async def test_complete_without_body_keeps_cost(self, client, auth_headers, maintenance_payload):
        payload = {**maintenance_payload, "type": "correctivo", "cost": 300.0, "notes": "Original"}
        created = await client.post("/api/maintenance", json=payload, headers=auth_headers)
        maintenance_id = created.json()["data"]["id"]

        response = await client.post(f"/api/maintenance/{maintenance_id}/complete", headers=auth_headers)

        data = response.json()["data"]
        assert data["status"] == "completed"
        assert data["cost"] == 300.0
        assert data["notes"] == "Original"
        assert data["next_due_date"] is None

    async def test_complete_missing(self, client, auth_headers):
        response = await client.post("/api/maintenance/999/complete", json={}, headers=auth_headers)

        assert response.status_code == 404


async def test_delete_is_permanent(client, auth_headers, maintenance_payload):
    created = await client.post("/api/maintenance", json=maintenance_payload, headers=auth_headers)
    maintenance_id = created.json()["data"]["id"]

    response = await client.delete(f"/api/maintenance/{maintenance_id}", headers=auth_headers)
    assert response.status_code == 200

    missing = await client.get(f"/api/maintenance/{maintenance_id}")
    assert missing.status_code == 404
