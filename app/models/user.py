"""
Modelo ORM para Usuarios.
"""
from sqlalchemy import Column, Integer, String, Text
from app.db.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    """Cuenta de usuario. Nunca se elimina físicamente."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), unique=True, nullable=False)
    email = Column(String(100), unique=True, nullable=False)
    password_hash = Column(Text, nullable=False)
    role = Column(String(20), default="user", server_default="user")
