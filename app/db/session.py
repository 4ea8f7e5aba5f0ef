"""
Conexión a la base de datos SQLite y capa de acceso a datos.

`DatabaseConnection` mantiene el engine y el sessionmaker; `Database` es el
handle que reciben los endpoints con tres operaciones parametrizadas:
execute, fetch_one y fetch_many.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Generator, List, Mapping, Optional

from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker

from app.config import get_settings

logger = logging.getLogger(__name__)

Params = Optional[Mapping[str, Any]]


@dataclass
class ExecuteResult:
    """Resultado de una sentencia de escritura."""
    lastrowid: Optional[int]
    rowcount: int


class Database:
    """
    Handle del almacén relacional.

    Todos los parámetros se enlazan con `:nombre`, nunca se concatenan
    valores del usuario en el SQL.
    """

    def __init__(self, session: Session):
        self.session = session

    def execute(self, sql: str, params: Params = None) -> ExecuteResult:
        """Ejecutar INSERT/UPDATE/DELETE y confirmar la transacción."""
        try:
            result = self.session.execute(text(sql), dict(params or {}))
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return ExecuteResult(lastrowid=result.lastrowid, rowcount=result.rowcount)

    def fetch_one(self, sql: str, params: Params = None) -> Optional[Dict[str, Any]]:
        """Obtener una fila como dict o None."""
        row = self.session.execute(text(sql), dict(params or {})).mappings().first()
        return dict(row) if row is not None else None

    def fetch_many(self, sql: str, params: Params = None) -> List[Dict[str, Any]]:
        """Obtener todas las filas como lista de dicts, en el orden de la consulta."""
        rows = self.session.execute(text(sql), dict(params or {})).mappings().all()
        return [dict(row) for row in rows]

    def scalar(self, sql: str, params: Params = None) -> Any:
        """Obtener el primer valor de la primera fila."""
        return self.session.execute(text(sql), dict(params or {})).scalar()

    def close(self) -> None:
        self.session.close()


def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseConnection:
    """
    Engine y sessionmaker de SQLAlchemy para un archivo SQLite.
    """

    def __init__(self, url: Optional[str] = None):
        settings = get_settings()
        url = url or settings.database_url

        if url.startswith("sqlite:///"):
            db_file = Path(url.replace("sqlite:///", "", 1))
            db_file.parent.mkdir(parents=True, exist_ok=True)

        self._engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            echo=settings.DEBUG,      # Log SQL queries en modo debug
        )
        event.listen(self._engine, "connect", _enable_foreign_keys)

        self._session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self._engine
        )
        logger.info(f"Conectado a la base de datos: {url}")

    @property
    def engine(self) -> Engine:
        """Obtener engine de SQLAlchemy."""
        return self._engine

    @property
    def session_factory(self) -> sessionmaker:
        """Obtener factory de sesiones."""
        return self._session_factory

    def get_database(self) -> Database:
        """Crear un nuevo handle con su propia sesión."""
        return Database(self._session_factory())

    def close(self):
        """Cerrar todas las conexiones."""
        if self._engine:
            self._engine.dispose()
            logger.info("Conexión a base de datos cerrada")


_connection: Optional[DatabaseConnection] = None


def get_db_connection() -> DatabaseConnection:
    """Obtener la conexión compartida del proceso (se crea al primer uso)."""
    global _connection
    if _connection is None:
        _connection = DatabaseConnection()
    return _connection


def get_db() -> Generator[Database, None, None]:
    """
    Dependencia que proporciona un handle de base de datos por request.

    Yields:
        Database: handle con execute/fetch_one/fetch_many
    """
    db = get_db_connection().get_database()
    try:
        yield db
    finally:
        db.close()
