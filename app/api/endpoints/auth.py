"""
Endpoints de autenticación.
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from app.core.deps import get_current_user, get_db
from app.db.session import Database
from app.schemas.auth import LoginRequest, ProfileUpdateRequest, RegisterRequest, UserProfile
from app.schemas.common import ApiResponse
from app.services import auth_service

router = APIRouter()


@router.post("/register", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_in: RegisterRequest,
    db: Database = Depends(get_db)
):
    """
    Registrar nuevo usuario.

    Requiere:
    - username de al menos 3 caracteres, único
    - email válido, único
    - contraseña de al menos 6 caracteres

    El usuario se crea siempre con rol user.

    Retorna los datos del usuario y un token JWT.
    """
    data = auth_service.register_user(db, user_in)
    return ApiResponse(message="Usuario registrado exitosamente", data=data)


@router.post("/login", response_model=ApiResponse)
def login(
    login_data: LoginRequest,
    db: Database = Depends(get_db)
):
    """
    Autenticar con username o email y obtener un token.
    """
    data = auth_service.login_user(db, login_data)
    return ApiResponse(message="Login exitoso", data=data)


@router.get("/profile", response_model=ApiResponse)
def get_profile(
    db: Database = Depends(get_db),
    current_user: Dict[str, Any] = Depends(get_current_user)
):
    """
    Obtener el perfil del usuario autenticado.
    """
    profile = auth_service.get_profile(db, current_user["id"])
    return ApiResponse(data=UserProfile(**profile))


@router.put("/profile", response_model=ApiResponse)
def update_profile(
    profile_in: ProfileUpdateRequest,
    db: Database = Depends(get_db),
    current_user: Dict[str, Any] = Depends(get_current_user)
):
    """
    Actualizar username, email o contraseña.

    Para cambiar la contraseña se debe enviar también la contraseña actual.
    """
    profile = auth_service.update_profile(db, current_user["id"], profile_in)
    return ApiResponse(message="Perfil actualizado exitosamente", data=UserProfile(**profile))


@router.post("/refresh", response_model=ApiResponse)
def refresh_token(
    current_user: Dict[str, Any] = Depends(get_current_user)
):
    """
    Renovar el token con los mismos datos de usuario.
    """
    token = auth_service.refresh_token(current_user)
    return ApiResponse(message="Token renovado exitosamente", data={"token": token})
