"""
Dependencias de FastAPI: construcción de los servicios por petición y la
guarda de autenticación para las rutas protegidas.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from auth_service.auth import AuthService
from auth_service.config import Settings
from auth_service.db import get_db
from auth_service.exceptions import AuthenticationError
from auth_service.repository import UserRepository
from auth_service.users import UserService

# auto_error=False: la ausencia de token se responde con AuthenticationError
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_user_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> UserService:
    return UserService(UserRepository(db), bcrypt_rounds=settings.bcrypt_rounds)


def get_auth_service(
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(users, settings)


def get_current_user_id(
    token: Optional[str] = Depends(oauth2_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> int:
    """
    Guarda de las rutas protegidas: exige un Bearer token válido y devuelve
    el id del usuario ('sub').
    """
    if not token:
        raise AuthenticationError("Not authenticated")
    payload = auth_service.validate_token(token)
    return payload.sub
