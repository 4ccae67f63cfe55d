"""Configuración del servicio de autenticación, leída desde variables de entorno (.env)."""

import os
import logging
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_JWT_SECRET = "your-secret-key"


class Settings(BaseModel):
    """
    Parámetros del servicio. Se construye una sola vez al arrancar y se pasa
    explícitamente a create_app(); ningún otro módulo lee el entorno.
    """

    database_url: Optional[str] = None
    database_host: str = "localhost"
    database_port: int = 3306
    database_user: str = "auth_user"
    database_password: str = ""
    database_name: str = "auth_db"

    # En producción JWT_SECRET debe sobrescribirse siempre
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_expiration: int = Field(default=3600, gt=0, description="Duración del token en segundos")

    bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    @property
    def sqlalchemy_database_url(self) -> str:
        """URL completa para SQLAlchemy. DATABASE_URL tiene prioridad sobre las partes sueltas."""
        if self.database_url:
            return self.database_url
        return (
            f"mysql+pymysql://{self.database_user}:{self.database_password}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

    @classmethod
    def from_env(cls) -> "Settings":
        # Carga variables de entorno desde el archivo .env del directorio de trabajo
        load_dotenv(find_dotenv(usecwd=True))

        settings = cls(
            database_url=os.getenv("DATABASE_URL") or None,
            database_host=os.getenv("DATABASE_HOST", "localhost"),
            database_port=int(os.getenv("DATABASE_PORT", 3306)),
            database_user=os.getenv("DATABASE_USER", "auth_user"),
            database_password=os.getenv("DATABASE_PASSWORD", ""),
            database_name=os.getenv("DATABASE_NAME", "auth_db"),
            jwt_secret=os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            jwt_expiration=int(os.getenv("JWT_EXPIRATION", 3600)),
            bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", 10)),
        )

        if settings.jwt_secret == DEFAULT_JWT_SECRET:
            logger.warning("JWT_SECRET is not set. Using the insecure default key; override it in production.")

        return settings
