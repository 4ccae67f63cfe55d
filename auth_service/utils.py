"""Funciones de utilidad para el servicio de autenticación: hash de contraseñas y manejo de JWT."""

import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Dict

from jose import JWTError, jwt
from passlib.context import CryptContext

logger = logging.getLogger(__name__)

DEFAULT_BCRYPT_ROUNDS = 10


@lru_cache(maxsize=None)
def get_password_context(rounds: int = DEFAULT_BCRYPT_ROUNDS) -> CryptContext:
    """Contexto passlib con bcrypt; uno por factor de coste."""
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=rounds,
    )


def get_password_hash(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Genera el hash de una contraseña plana usando bcrypt (salt incluido en el hash)."""
    return get_password_context(rounds).hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifica una contraseña plana contra un hash almacenado."""
    try:
        return get_password_context().verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Hash vacío o con formato desconocido
        return False


# --- Utilidades para Tokens JWT ---
def create_access_token(data: Dict, secret_key: str, algorithm: str, expires_in: int) -> str:
    """
    Genera un token de acceso JWT con los datos proporcionados y una marca de tiempo de expiración.

    Args:
        data: Diccionario (payload) a incluir en el token (ej., {'sub': '1', 'email': ...}).
        secret_key: Clave de firma.
        algorithm: Algoritmo de firma (HS256 por defecto).
        expires_in: Segundos de validez del token.

    Returns:
        String del JWT codificado.
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, secret_key, algorithm=algorithm)


def decode_token(token: str, secret_key: str, algorithm: str) -> Dict:
    """
    Decodifica y valida un token JWT (firma y expiración).

    Raises:
        JWTError: si la firma no es válida, el token está mal formado o ha expirado.
    """
    try:
        return jwt.decode(
            token,
            secret_key,
            algorithms=[algorithm],
            options={"verify_aud": False},
        )
    except JWTError as e:
        logger.warning(f"Token decoding failed: {e}")
        raise
