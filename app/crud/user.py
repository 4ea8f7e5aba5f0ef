"""
CRUD de usuarios.
"""
from typing import Any, Dict, Optional

from app.core.security import get_password_hash, verify_password
from app.crud.base import CRUDBase
from app.db.session import Database

PROFILE_COLUMNS = "id, username, email, role, created_at, updated_at"


class CRUDUser(CRUDBase):
    """Operaciones sobre la tabla users (sin soft delete)."""

    def get_profile(self, db: Database, id: Any) -> Optional[Dict[str, Any]]:
        """Usuario sin password_hash."""
        return db.fetch_one(f"SELECT {PROFILE_COLUMNS} FROM users WHERE id = :id", {"id": id})

    def get_by_login(self, db: Database, login: str) -> Optional[Dict[str, Any]]:
        """Buscar por username o email."""
        return db.fetch_one(
            "SELECT * FROM users WHERE username = :login OR email = :login",
            {"login": login}
        )

    def exists_username_or_email(
        self,
        db: Database,
        username: Optional[str] = None,
        email: Optional[str] = None,
        exclude_id: Optional[int] = None
    ) -> bool:
        """Verificar si otro usuario ya usa el username o el email."""
        row = db.fetch_one(
            "SELECT id FROM users WHERE (username = :username OR email = :email) "
            "AND (:exclude_id IS NULL OR id != :exclude_id)",
            {"username": username, "email": email, "exclude_id": exclude_id}
        )
        return row is not None

    def create_with_password(
        self,
        db: Database,
        *,
        username: str,
        email: str,
        password: str,
        role: str = "user"
    ) -> Dict[str, Any]:
        """Crear usuario guardando solo el hash de la contraseña."""
        return self.create(db, obj_in={
            "username": username,
            "email": email,
            "password_hash": get_password_hash(password),
            "role": role,
        })

    def authenticate(self, db: Database, login: str, password: str) -> Optional[Dict[str, Any]]:
        """Devolver el usuario si las credenciales son válidas."""
        user = self.get_by_login(db, login)
        if not user or not verify_password(password, user["password_hash"]):
            return None
        return user


user = CRUDUser("users", ("username", "email", "password_hash", "role"), soft_delete=False)
