"""Registro, login y verificación de tokens JWT sobre UserService."""

import logging
from typing import Any, Dict, Optional

from jose import JWTError
from pydantic import ValidationError as PayloadError

from auth_service.config import Settings
from auth_service.exceptions import AuthenticationError
from auth_service.models import User
from auth_service.schemas import TokenPayload, UserResponse
from auth_service.users import UserService
from auth_service.utils import create_access_token, decode_token

logger = logging.getLogger(__name__)

# Mismo mensaje para "no existe" y "contraseña incorrecta"
INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:

    def __init__(self, users: UserService, settings: Settings):
        self.users = users
        self.settings = settings

    def register(
        self,
        email: str,
        password: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Crea el usuario (los errores de UserService se propagan tal cual) y emite su token."""
        logger.info(f"Registration attempt for email: {email}")
        user = self.users.create(email, password, first_name=first_name, last_name=last_name)
        return self._token_response(user)

    def login(self, email: str, password: str) -> Dict[str, Any]:
        logger.info(f"Login attempt for user: {email}")
        user = self.users.find_by_email(email)

        if user is None:
            logger.warning(f"Login failed for user: {email}")
            raise AuthenticationError(INVALID_CREDENTIALS)

        if not self.users.validate_password(password, user.hashed_password):
            logger.warning(f"Login failed for user: {email}")
            raise AuthenticationError(INVALID_CREDENTIALS)

        logger.info(f"Login successful for user_id: {user.id}")
        return self._token_response(user)

    def validate_token(self, token: str) -> TokenPayload:
        """
        Verifica firma y expiración del token y devuelve sus claims.

        Raises:
            AuthenticationError: token mal formado, con firma inválida o expirado.
        """
        try:
            payload = decode_token(token, self.settings.jwt_secret, self.settings.jwt_algorithm)
            return TokenPayload.model_validate(payload)
        except (JWTError, PayloadError) as e:
            raise AuthenticationError("Invalid or expired token") from e

    def get_current_user(self, user_id: int) -> User:
        return self.users.find_by_id(user_id)

    def create_token(self, user: User) -> str:
        # 'sub' viaja como string según el estándar JWT
        return create_access_token(
            {"sub": str(user.id), "email": user.email},
            secret_key=self.settings.jwt_secret,
            algorithm=self.settings.jwt_algorithm,
            expires_in=self.settings.jwt_expiration,
        )

    def _token_response(self, user: User) -> Dict[str, Any]:
        return {
            "access_token": self.create_token(user),
            "token_type": "bearer",
            "user": UserResponse.model_validate(user),
        }
