"""
Servicio de inicialización de la aplicación.
Crea tablas e índices y carga datos iniciales al arrancar.
"""
import logging
from datetime import datetime

import app.models  # noqa: F401  registra las tablas en Base.metadata
from app.config import get_settings
from app.crud.institution import institution as crud_institution
from app.crud.maintenance import maintenance as crud_maintenance
from app.crud.user import user as crud_user
from app.db.base import Base
from app.db.session import Database, DatabaseConnection
from app.schemas.institution import compute_total_capacity

logger = logging.getLogger(__name__)


DEMO_INSTITUTIONS = [
    {
        "name": "Universidad Laica Eloy Alfaro de Manabí",
        "type": "universidad",
        "acronym": "ULEAM",
        "location": "Manta, Manabí, Ecuador",
        "address": "Ciudadela Universitaria, Vía San Mateo",
        "email": "info@uleam.edu.ec",
        "website": "https://www.uleam.edu.ec",
        "buildings_count": 8,
        "classrooms_count": 45,
        "laboratories_count": 12,
    },
    {
        "name": "Colegio Amazonas de Quito",
        "type": "colegio",
        "acronym": "CAQ",
        "location": "Quito, Pichincha, Ecuador",
        "address": "Av. Amazonas y Colón, Quito",
        "email": "info@colegioamazonas.edu.ec",
        "buildings_count": 3,
        "classrooms_count": 24,
        "laboratories_count": 6,
    },
    {
        "name": "Escuela Primaria Benito Juárez",
        "type": "escuela",
        "acronym": "EPBJ",
        "location": "Guayaquil, Guayas, Ecuador",
        "address": "Av. 9 de Octubre y Malecón, Guayaquil",
        "email": "info@benitojuarez.edu.ec",
        "buildings_count": 2,
        "classrooms_count": 12,
        "laboratories_count": 1,
    },
]

# institution_index apunta a DEMO_INSTITUTIONS
DEMO_MAINTENANCE = [
    {
        "institution_index": 0,
        "type": "preventivo",
        "title": "Mantenimiento de sistemas eléctricos",
        "description": "Revisión y mantenimiento de toda la instalación eléctrica",
        "scheduled_date": "2025-02-20",
        "next_due_date": "2025-08-20",
        "priority": "high",
        "status": "scheduled",
    },
    {
        "institution_index": 0,
        "type": "correctivo",
        "title": "Reparación de filtraciones en laboratorio",
        "description": "Reparación de filtraciones detectadas en el techo del laboratorio de química",
        "scheduled_date": "2025-01-15",
        "completed_date": "2025-01-15",
        "status": "completed",
        "cost": 850.00,
    },
    {
        "institution_index": 1,
        "type": "preventivo",
        "title": "Limpieza y mantenimiento de aires acondicionados",
        "description": "Mantenimiento preventivo de sistemas de climatización",
        "scheduled_date": "2025-03-05",
        "next_due_date": "2025-09-05",
        "priority": "medium",
        "status": "scheduled",
    },
]


def create_tables(connection: DatabaseConnection) -> None:
    """Crear tablas e índices que no existan (idempotente)."""
    Base.metadata.create_all(bind=connection.engine)
    logger.info("Tablas de base de datos creadas/verificadas")


def init_admin_user(db: Database) -> bool:
    """
    Crear usuario administrador inicial si no hay usuarios.

    Returns:
        True si se creó el usuario
    """
    settings = get_settings()

    if crud_user.get_count(db) > 0:
        return False

    if not settings.ADMIN_PASSWORD:
        logger.warning("ADMIN_PASSWORD no configurado; no se crea administrador")
        return False

    crud_user.create_with_password(
        db,
        username=settings.ADMIN_USERNAME,
        email=settings.ADMIN_EMAIL,
        password=settings.ADMIN_PASSWORD,
        role="admin",
    )
    logger.info(f"Usuario administrador creado: {settings.ADMIN_USERNAME}")
    logger.warning("IMPORTANTE: Cambia la contraseña del administrador después del primer login")
    return True


def seed_demo_data(db: Database) -> bool:
    """
    Insertar instituciones y mantenimientos de ejemplo.

    Solo se ejecuta si la tabla de instituciones está vacía.

    Returns:
        True si se insertaron datos
    """
    if crud_institution.get_count(db, include_deleted=True) > 0:
        return False

    logger.info("Insertando datos iniciales...")

    institution_ids = []
    for data in DEMO_INSTITUTIONS:
        row = dict(data)
        row["total_capacity"] = compute_total_capacity(
            row["classrooms_count"], row["laboratories_count"]
        )
        institution_ids.append(crud_institution.create(db, obj_in=row)["id"])

    for data in DEMO_MAINTENANCE:
        row = dict(data)
        row["institution_id"] = institution_ids[row.pop("institution_index")]
        crud_maintenance.create(db, obj_in=row)

    db.execute(
        "INSERT INTO system_config (key_name, value, description) VALUES (:key, :value, :description) "
        "ON CONFLICT(key_name) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP",
        {
            "key": "demo_data_seeded_at",
            "value": datetime.now().isoformat(timespec="seconds"),
            "description": "Fecha de carga de los datos de demostración",
        }
    )

    logger.info("Datos iniciales insertados correctamente")
    return True


def run_initialization(connection: DatabaseConnection, seed: bool = True) -> None:
    """
    Ejecutar todas las tareas de inicialización.
    Se llama en el evento startup de FastAPI; es seguro repetirla.
    """
    logger.info("Ejecutando inicialización...")

    create_tables(connection)

    db = connection.get_database()
    try:
        init_admin_user(db)
        if seed:
            seed_demo_data(db)
    finally:
        db.close()

    logger.info("Inicialización completada")
