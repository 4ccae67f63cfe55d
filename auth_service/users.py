"""
Servicio de usuarios: valida los datos de entrada, garantiza la unicidad del
email, genera el hash de la contraseña y media todo acceso a UserRepository.
"""

import logging
import re
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError

from auth_service.exceptions import ConflictError, NotFoundError, ValidationError
from auth_service.models import User
from auth_service.repository import UserRepository
from auth_service.utils import DEFAULT_BCRYPT_ROUNDS, get_password_hash, verify_password

logger = logging.getLogger(__name__)

# Ambos patrones se aplican con fullmatch sobre la cadena completa
EMAIL_REGEX = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

# Al menos 8 caracteres, una mayúscula, un dígito ASCII y un símbolo de @$!%*?&
PASSWORD_REGEX = re.compile(r"(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}", re.ASCII)

UPDATABLE_FIELDS = {"first_name", "last_name"}


class UserService:

    def __init__(self, repository: UserRepository, bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS):
        self.repository = repository
        self.bcrypt_rounds = bcrypt_rounds

    def create(
        self,
        email: str,
        password: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> User:
        """
        Crea un usuario nuevo con la contraseña hasheada.

        Raises:
            ValidationError: email o contraseña con formato inválido.
            ConflictError: ya existe un usuario con ese email.
        """
        if not EMAIL_REGEX.fullmatch(email):
            raise ValidationError("Invalid email format")

        if not PASSWORD_REGEX.fullmatch(password):
            raise ValidationError(
                "Password must be at least 8 characters with uppercase, number, and special character"
            )

        if self.repository.find_by_email(email) is not None:
            logger.warning(f"User creation failed: email {email} already exists.")
            raise ConflictError("User with this email already exists")

        hashed_password = get_password_hash(password, rounds=self.bcrypt_rounds)

        try:
            user = self.repository.create(
                email=email,
                hashed_password=hashed_password,
                first_name=first_name,
                last_name=last_name,
            )
        except IntegrityError as e:
            # Otro registro concurrente ganó la carrera por el índice único
            logger.warning(f"Integrity error creating user {email}: {e}")
            raise ConflictError("User with this email already exists") from e

        logger.info(f"User created with ID: {user.id} for email: {email}")
        return user

    def find_by_email(self, email: str) -> Optional[User]:
        return self.repository.find_by_email(email)

    def find_by_id(self, user_id: int) -> User:
        user = self.repository.find_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User with id {user_id} not found")
        return user

    def update(self, user_id: int, changes: Dict[str, Any]) -> User:
        """Actualiza nombre y/o apellido. El email es inmutable."""
        user = self.find_by_id(user_id)

        if "email" in changes:
            raise ValidationError("Email cannot be updated")

        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        for field, value in changes.items():
            setattr(user, field, value)

        user = self.repository.save(user)
        logger.info(f"User {user_id} updated fields: {', '.join(sorted(changes)) or '-'}")
        return user

    def delete(self, user_id: int) -> None:
        user = self.find_by_id(user_id)
        self.repository.delete(user)
        logger.info(f"User {user_id} deleted.")

    def validate_password(self, plain_password: str, hashed_password: str) -> bool:
        return verify_password(plain_password, hashed_password)
