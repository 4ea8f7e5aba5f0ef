"""
Servicio de autenticación.
Maneja registro, login, perfil y renovación de tokens.
"""
import logging
from typing import Any, Dict

from app.core.exceptions import BadRequestException, ConflictException, NotFoundException, UnauthorizedException
from app.core.security import create_access_token, get_password_hash, verify_password
from app.crud.user import user as crud_user
from app.db.session import Database
from app.schemas.auth import AuthData, LoginRequest, ProfileUpdateRequest, RegisterRequest, UserRole

logger = logging.getLogger(__name__)


def _auth_data(user: Dict[str, Any]) -> AuthData:
    """Datos públicos del usuario más un token nuevo."""
    return AuthData(
        id=user["id"],
        username=user["username"],
        email=user["email"],
        role=user["role"],
        token=create_access_token(user),
    )


def register_user(db: Database, user_in: RegisterRequest) -> AuthData:
    """
    Registrar nuevo usuario.

    Raises:
        ConflictException: Si el username o el email ya están registrados
    """
    email = user_in.email.lower()
    if crud_user.exists_username_or_email(db, username=user_in.username, email=email):
        raise ConflictException("El usuario o email ya existe")

    user = crud_user.create_with_password(
        db,
        username=user_in.username,
        email=email,
        password=user_in.password,
        role=UserRole.user.value,
    )
    logger.info(f"Usuario registrado: {user['username']}")
    return _auth_data(user)


def login_user(db: Database, login_data: LoginRequest) -> AuthData:
    """
    Autenticar usuario por username o email.

    Raises:
        UnauthorizedException: Si las credenciales son inválidas
    """
    login = login_data.login
    user = crud_user.authenticate(db, login, login_data.password)
    if not user and "@" in login:
        user = crud_user.authenticate(db, login.lower(), login_data.password)

    if not user:
        logger.warning(f"Login fallido para: {login}")
        raise UnauthorizedException("Credenciales inválidas")

    return _auth_data(user)


def get_profile(db: Database, user_id: int) -> Dict[str, Any]:
    """Perfil del usuario autenticado."""
    profile = crud_user.get_profile(db, user_id)
    if not profile:
        raise NotFoundException("Usuario no encontrado")
    return profile


def update_profile(db: Database, user_id: int, data: ProfileUpdateRequest) -> Dict[str, Any]:
    """
    Actualizar username/email y, si se pide, la contraseña.

    Cambiar la contraseña exige la contraseña actual correcta.
    """
    user = crud_user.get(db, user_id)
    if not user:
        raise NotFoundException("Usuario no encontrado")

    updates: Dict[str, Any] = {}

    if data.new_password:
        if not data.current_password:
            raise BadRequestException("Debe indicar la contraseña actual")
        if not verify_password(data.current_password, user["password_hash"]):
            raise BadRequestException("Contraseña actual incorrecta")
        updates["password_hash"] = get_password_hash(data.new_password)

    if data.username:
        updates["username"] = data.username
    if data.email:
        updates["email"] = data.email.lower()

    if ("username" in updates or "email" in updates) and crud_user.exists_username_or_email(
        db,
        username=updates.get("username"),
        email=updates.get("email"),
        exclude_id=user_id,
    ):
        raise ConflictException("El usuario o email ya existe")

    if updates:
        crud_user.update(db, id=user_id, obj_in=updates)

    return crud_user.get_profile(db, user_id)


def refresh_token(claims: Dict[str, Any]) -> str:
    """Emitir un token nuevo con los mismos claims de usuario."""
    return create_access_token(claims)
