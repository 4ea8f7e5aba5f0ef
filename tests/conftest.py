"""
GMPI - Configuración de tests y fixtures
"""
import os
import tempfile
from typing import AsyncGenerator, Generator

import pytest
from faker import Faker
from httpx import ASGITransport, AsyncClient

# Entorno de pruebas (antes de importar la app)
TEST_DIR = tempfile.mkdtemp(prefix="gmpi-tests-")
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["DB_PATH"] = os.path.join(TEST_DIR, "test.db")
os.environ["UPLOAD_DIR"] = os.path.join(TEST_DIR, "uploads")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SEED_DEMO_DATA"] = "false"

from app.main import app  # noqa: E402
from app.core.deps import get_db  # noqa: E402
from app.core.security import create_access_token  # noqa: E402
from app.crud.institution import institution as crud_institution  # noqa: E402
from app.crud.user import user as crud_user  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.session import Database, DatabaseConnection  # noqa: E402
from app.schemas.institution import compute_total_capacity  # noqa: E402

fake = Faker()

connection = DatabaseConnection()


@pytest.fixture(scope="session")
def db_connection() -> DatabaseConnection:
    """Conexión compartida a la base de datos de pruebas."""
    return connection


@pytest.fixture(scope="function")
def db() -> Generator[Database, None, None]:
    """Base de datos limpia para cada test."""
    Base.metadata.drop_all(bind=connection.engine)
    Base.metadata.create_all(bind=connection.engine)

    database = connection.get_database()
    yield database
    database.close()


@pytest.fixture
async def client(db: Database) -> AsyncGenerator[AsyncClient, None]:
    """Cliente HTTP contra la app con la base de datos de pruebas."""
    def override_get_db():
        database = connection.get_database()
        try:
            yield database
        finally:
            database.close()

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def test_user(db: Database) -> dict:
    """Usuario con rol user."""
    return crud_user.create_with_password(
        db,
        username=fake.user_name() + "1",
        email=fake.email(),
        password="testpassword123",
        role="user",
    )


@pytest.fixture
def test_admin(db: Database) -> dict:
    """Usuario con rol admin."""
    return crud_user.create_with_password(
        db,
        username="admin_" + fake.user_name(),
        email="admin_" + fake.email(),
        password="adminpassword123",
        role="admin",
    )


@pytest.fixture
def auth_headers(test_user: dict) -> dict:
    """Headers de autenticación para el usuario de prueba."""
    return {"Authorization": f"Bearer {create_access_token(test_user)}"}


@pytest.fixture
def admin_headers(test_admin: dict) -> dict:
    """Headers de autenticación para el administrador."""
    return {"Authorization": f"Bearer {create_access_token(test_admin)}"}


@pytest.fixture
def test_institution(db: Database) -> dict:
    """Institución activa de prueba."""
    return crud_institution.create(db, obj_in={
        "name": "Unidad Educativa " + fake.last_name(),
        "type": "colegio",
        "location": fake.city(),
        "buildings_count": 2,
        "classrooms_count": 10,
        "laboratories_count": 2,
        "total_capacity": compute_total_capacity(10, 2),
    })
