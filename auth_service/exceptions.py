"""Errores de dominio del servicio de autenticación y su código HTTP asociado."""

from fastapi import status


class AuthServiceError(Exception):
    """Base de todos los errores que el servicio traduce a una respuesta HTTP."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(AuthServiceError):
    """Email o contraseña mal formados, o campo no permitido en una actualización."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(AuthServiceError):
    """Credenciales incorrectas o token inválido/expirado."""

    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(AuthServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AuthServiceError):
    """El email ya está registrado."""

    status_code = status.HTTP_409_CONFLICT
