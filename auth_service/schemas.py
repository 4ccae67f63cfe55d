"""Modelos Pydantic (schemas) para validación de datos de entrada/salida en el Servicio de Autenticación."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# --- Schemas de Usuario ---

class UserCreate(BaseModel):
    """Datos de registro. El formato de email/contraseña lo valida UserService."""
    email: str
    password: str
    first_name: Optional[str] = Field(default=None, alias="firstName", max_length=100)
    last_name: Optional[str] = Field(default=None, alias="lastName", max_length=100)

    model_config = ConfigDict(populate_by_name=True)


class LoginRequest(BaseModel):
    email: str
    password: str


class UserUpdate(BaseModel):
    """
    Cambios de perfil. Se aceptan campos extra para que UserService pueda
    rechazar explícitamente un intento de cambiar el email.
    """
    first_name: Optional[str] = Field(default=None, alias="firstName", max_length=100)
    last_name: Optional[str] = Field(default=None, alias="lastName", max_length=100)

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_changes(self) -> Dict[str, Any]:
        """Solo los campos enviados por el cliente, con nombres de columna."""
        return self.model_dump(exclude_unset=True)


class UserResponse(BaseModel):
    """Datos públicos del usuario (excluye el hash de la contraseña)."""
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Mapeo desde modelos ORM y salida en camelCase
    model_config = ConfigDict(from_attributes=True, populate_by_name=True, alias_generator=to_camel)


# --- Schemas de Token ---

class AuthResponse(BaseModel):
    """Token de acceso JWT más el usuario autenticado."""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class TokenPayload(BaseModel):
    """Payload decodificado de un token JWT válido. 'sub' es el id del usuario."""
    sub: int
    email: str
    exp: int
