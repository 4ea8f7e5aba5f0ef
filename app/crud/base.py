"""
CRUD base genérico con operaciones comunes y soporte para Soft Delete.

Las columnas que se pueden escribir se declaran explícitamente por tabla;
cualquier otra clave recibida se ignora, así el SQL dinámico nunca incluye
nombres de columna provenientes del request.
"""
from typing import Any, Dict, List, Mapping, Optional, Sequence

from app.db.base import STATUS_ACTIVE, STATUS_DELETED
from app.db.session import Database


class CRUDBase:
    """
    Clase base para operaciones CRUD con soporte para Soft Delete.

    Las consultas filtran automáticamente los registros eliminados
    (status = 'deleted') a menos que se especifique lo contrario.
    """

    def __init__(self, table: str, columns: Sequence[str], soft_delete: bool = True):
        """
        Args:
            table: Nombre de la tabla
            columns: Columnas escribibles (allow-list)
            soft_delete: Si la tabla usa status 'active'/'deleted'
        """
        self.table = table
        self.columns = tuple(columns)
        self.soft_delete_enabled = soft_delete

    def _writable(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        return {key: data[key] for key in self.columns if key in data}

    def get(
        self,
        db: Database,
        id: Any,
        include_deleted: bool = False
    ) -> Optional[Dict[str, Any]]:
        """
        Obtener un registro por ID.

        Args:
            db: Handle de base de datos
            id: ID del registro
            include_deleted: Si es True, incluye registros eliminados

        Returns:
            Registro encontrado o None
        """
        sql = f"SELECT * FROM {self.table} WHERE id = :id"
        params: Dict[str, Any] = {"id": id}
        if self.soft_delete_enabled and not include_deleted:
            sql += " AND status = :status"
            params["status"] = STATUS_ACTIVE
        return db.fetch_one(sql, params)

    def exists(self, db: Database, id: Any) -> bool:
        """Verificar si existe un registro activo con ese ID."""
        return self.get(db, id) is not None

    def get_count(self, db: Database, include_deleted: bool = False) -> int:
        """Obtener el total de registros."""
        sql = f"SELECT COUNT(*) FROM {self.table}"
        params: Dict[str, Any] = {}
        if self.soft_delete_enabled and not include_deleted:
            sql += " WHERE status = :status"
            params["status"] = STATUS_ACTIVE
        return db.scalar(sql, params) or 0

    def create(self, db: Database, *, obj_in: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Crear un nuevo registro.

        Args:
            db: Handle de base de datos
            obj_in: Datos de entrada (solo se usan columnas permitidas)

        Returns:
            Registro creado
        """
        data = self._writable(obj_in)
        columns = ", ".join(data)
        placeholders = ", ".join(f":{key}" for key in data)
        result = db.execute(
            f"INSERT INTO {self.table} ({columns}) VALUES ({placeholders})",
            data
        )
        return db.fetch_one(f"SELECT * FROM {self.table} WHERE id = :id", {"id": result.lastrowid})

    def update(
        self,
        db: Database,
        *,
        id: Any,
        obj_in: Mapping[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """
        Actualizar un registro existente con los campos permitidos recibidos.

        Args:
            db: Handle de base de datos
            id: ID del registro
            obj_in: Campos a actualizar

        Returns:
            Registro actualizado (o None si no existe)
        """
        data = self._writable(obj_in)
        assignments = [f"{key} = :{key}" for key in data]
        assignments.append("updated_at = CURRENT_TIMESTAMP")
        params = {**data, "id": id}
        db.execute(
            f"UPDATE {self.table} SET {', '.join(assignments)} WHERE id = :id",
            params
        )
        return db.fetch_one(f"SELECT * FROM {self.table} WHERE id = :id", {"id": id})

    def remove(self, db: Database, *, id: Any) -> bool:
        """
        Eliminar un registro (HARD DELETE).

        Returns:
            True si se eliminó alguna fila
        """
        result = db.execute(f"DELETE FROM {self.table} WHERE id = :id", {"id": id})
        return result.rowcount > 0

    def soft_delete(self, db: Database, *, id: Any) -> bool:
        """
        Eliminar un registro de forma suave (Soft Delete).

        Marca el registro con status 'deleted'. El registro permanece en la
        base de datos pero no aparece en las consultas normales.

        Returns:
            True si se marcó algún registro activo
        """
        result = db.execute(
            f"UPDATE {self.table} SET status = :deleted, updated_at = CURRENT_TIMESTAMP "
            f"WHERE id = :id AND status = :active",
            {"deleted": STATUS_DELETED, "active": STATUS_ACTIVE, "id": id}
        )
        return result.rowcount > 0

    def list_where(
        self,
        db: Database,
        where: List[str],
        params: Dict[str, Any],
        order_by: str = "id ASC"
    ) -> List[Dict[str, Any]]:
        """Listar filas con condiciones ya parametrizadas."""
        sql = f"SELECT * FROM {self.table}"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += f" ORDER BY {order_by}"
        return db.fetch_many(sql, params)
