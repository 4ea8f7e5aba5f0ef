"""
Schemas para autenticación.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class UserRole(str, Enum):
    """Roles de usuario."""
    admin = "admin"
    user = "user"


class RegisterRequest(BaseModel):
    """
    Schema para registro público.

    Siempre crea usuarios con rol user; el administrador se crea al
    inicializar la aplicación.
    """

    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)

    model_config = {"str_strip_whitespace": True}


class LoginRequest(BaseModel):
    """Schema para solicitud de login (username o email)."""

    login: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    model_config = {"str_strip_whitespace": True}


class ProfileUpdateRequest(BaseModel):
    """Schema para actualización de perfil y cambio de contraseña."""

    username: Optional[str] = Field(None, min_length=3, max_length=50)
    email: Optional[EmailStr] = None
    current_password: Optional[str] = Field(None, min_length=1, alias="currentPassword")
    new_password: Optional[str] = Field(None, min_length=6, max_length=100, alias="newPassword")

    model_config = {"populate_by_name": True}


class UserProfile(BaseModel):
    """Perfil público de un usuario (sin hash de contraseña)."""

    id: int
    username: str
    email: str
    role: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AuthData(BaseModel):
    """Datos devueltos por registro y login."""

    id: int
    username: str
    email: str
    role: str
    token: str
