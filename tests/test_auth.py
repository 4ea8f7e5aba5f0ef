"""
Tests de autenticación.
"""
from datetime import timedelta

from app.core.security import create_access_token, decode_token

REGISTER_PAYLOAD = {
    "username": "tecnico01",
    "email": "Tecnico01@Gmpi.ec",
    "password": "segura123",
}


async def test_register_returns_token(client, db):
    response = await client.post("/api/auth/register", json=REGISTER_PAYLOAD)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["username"] == "tecnico01"
    assert data["email"] == "tecnico01@gmpi.ec"
    assert data["role"] == "user"
    assert "password_hash" not in data

    claims = decode_token(data["token"])
    assert claims["id"] == data["id"]
    assert claims["sub"] == str(data["id"])
    assert claims["type"] == "access"


async def test_duplicate_email_conflict(client, db):
    first = await client.post("/api/auth/register", json=REGISTER_PAYLOAD)
    second = await client.post(
        "/api/auth/register", json={**REGISTER_PAYLOAD, "username": "otro_usuario"}
    )

    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json() == {"success": False, "message": "El usuario o email ya existe"}


async def test_register_validation(client, db):
    response = await client.post(
        "/api/auth/register",
        json={"username": "ab", "email": "no-es-email", "password": "123"},
    )

    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert fields == {"username", "email", "password"}


async def test_register_cannot_choose_role(client, db, test_institution):
    response = await client.post("/api/auth/register", json={**REGISTER_PAYLOAD, "role": "admin"})

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["role"] == "user"
    assert decode_token(data["token"])["role"] == "user"

    deleted = await client.delete(
        f"/api/institutions/{test_institution['id']}",
        headers={"Authorization": f"Bearer {data['token']}"},
    )
    assert deleted.status_code == 403


async def test_login_with_username_or_email(client, db):
    await client.post("/api/auth/register", json=REGISTER_PAYLOAD)

    by_username = await client.post("/api/auth/login", json={"login": "tecnico01", "password": "segura123"})
    by_email = await client.post(
        "/api/auth/login", json={"login": "TECNICO01@gmpi.ec", "password": "segura123"}
    )

    assert by_username.status_code == 200
    assert by_email.status_code == 200
    assert by_email.json()["data"]["token"]


async def test_login_wrong_password(client, db):
    await client.post("/api/auth/register", json=REGISTER_PAYLOAD)

    response = await client.post("/api/auth/login", json={"login": "tecnico01", "password": "incorrecta"})

    assert response.status_code == 401
    assert response.json()["message"] == "Credenciales inválidas"


async def test_profile(client, auth_headers, test_user):
    response = await client.get("/api/auth/profile", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["id"] == test_user["id"]
    assert data["username"] == test_user["username"]


async def test_profile_requires_token(client, db):
    response = await client.get("/api/auth/profile")

    assert response.status_code == 401


async def test_expired_token(client, test_user):
    token = create_access_token(test_user, expires_delta=timedelta(minutes=-1))

    response = await client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["message"] == "Token inválido"


async def test_change_password(client, auth_headers, test_user):
    missing_current = await client.put(
        "/api/auth/profile", json={"newPassword": "nueva123"}, headers=auth_headers
    )
    wrong_current = await client.put(
        "/api/auth/profile",
        json={"currentPassword": "equivocada", "newPassword": "nueva123"},
        headers=auth_headers,
    )
    changed = await client.put(
        "/api/auth/profile",
        json={"currentPassword": "testpassword123", "newPassword": "nueva123"},
        headers=auth_headers,
    )
    login = await client.post(
        "/api/auth/login", json={"login": test_user["username"], "password": "nueva123"}
    )

    assert missing_current.status_code == 400
    assert wrong_current.status_code == 400
    assert wrong_current.json()["message"] == "Contraseña actual incorrecta"
    assert changed.status_code == 200
    assert login.status_code == 200


async def test_profile_username_conflict(client, auth_headers, test_admin):
    response = await client.put(
        "/api/auth/profile", json={"username": test_admin["username"]}, headers=auth_headers
    )

    assert response.status_code == 409


async def test_refresh_keeps_claims(client, auth_headers, test_user):
    response = await client.post("/api/auth/refresh", headers=auth_headers)

    assert response.status_code == 200
    claims = decode_token(response.json()["data"]["token"])
    assert claims["id"] == test_user["id"]
    assert claims["username"] == test_user["username"]
    assert claims["role"] == "user"
