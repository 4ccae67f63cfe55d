# tests/test_auth.py
"""Pruebas de AuthService: registro, login y validación de tokens."""

import time

import pytest
from jose import jwt

from auth_service.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from auth_service.schemas import UserResponse
from auth_service.utils import create_access_token

from .conftest import TEST_EMAIL, TEST_PASSWORD


def test_register_returns_token_and_user(auth_service, settings):
    result = auth_service.register(TEST_EMAIL, TEST_PASSWORD, first_name="John", last_name="Doe")

    assert result["token_type"] == "bearer"
    assert isinstance(result["user"], UserResponse)
    assert result["user"].email == TEST_EMAIL
    assert result["user"].first_name == "John"
    assert "hashed_password" not in result["user"].model_dump()

    claims = jwt.decode(result["access_token"], settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    assert claims["sub"] == str(result["user"].id)
    assert claims["email"] == TEST_EMAIL


def test_register_duplicate_email(auth_service):
    """
    Verifica que no se puede registrar un usuario con un email existente.
    """
    auth_service.register(TEST_EMAIL, TEST_PASSWORD)

    with pytest.raises(ConflictError):
        auth_service.register(TEST_EMAIL, "Other@5678")


def test_register_propagates_validation_errors(auth_service):
    with pytest.raises(ValidationError):
        auth_service.register("not-an-email", TEST_PASSWORD)
    with pytest.raises(ValidationError):
        auth_service.register(TEST_EMAIL, "123")


def test_login_token_carries_user_claims(auth_service):
    registered = auth_service.register(TEST_EMAIL, TEST_PASSWORD)

    result = auth_service.login(TEST_EMAIL, TEST_PASSWORD)

    payload = auth_service.validate_token(result["access_token"])
    assert payload.sub == registered["user"].id
    assert payload.email == TEST_EMAIL
    assert result["user"].id == registered["user"].id


def test_login_invalid_credentials(auth_service):
    """
    Verifica que el login falla igual con un email inexistente y con una
    contraseña incorrecta (mismo mensaje en ambos casos).
    """
    auth_service.register(TEST_EMAIL, TEST_PASSWORD)

    with pytest.raises(AuthenticationError) as unknown_user:
        auth_service.login("nonexistent@example.com", TEST_PASSWORD)
    with pytest.raises(AuthenticationError) as wrong_password:
        auth_service.login(TEST_EMAIL, "Wrong@1234")

    assert unknown_user.value.detail == "Invalid email or password"
    assert str(unknown_user.value) == str(wrong_password.value)
    assert unknown_user.value.status_code == wrong_password.value.status_code == 401


def test_validate_token_rejects_tampered_token(auth_service):
    token = auth_service.register(TEST_EMAIL, TEST_PASSWORD)["access_token"]
    header, payload, signature = token.split(".")
    tampered = ".".join([header, payload, signature[::-1]])

    with pytest.raises(AuthenticationError):
        auth_service.validate_token(tampered)


def test_validate_token_rejects_foreign_signature(auth_service, settings):
    token = create_access_token(
        {"sub": "1", "email": TEST_EMAIL},
        secret_key="another-secret",
        algorithm=settings.jwt_algorithm,
        expires_in=60,
    )

    with pytest.raises(AuthenticationError):
        auth_service.validate_token(token)


def test_validate_token_rejects_expired_token(auth_service, settings):
    token = create_access_token(
        {"sub": "1", "email": TEST_EMAIL},
        secret_key=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_in=-10,
    )

    with pytest.raises(AuthenticationError):
        auth_service.validate_token(token)


def test_validate_token_rejects_garbage(auth_service):
    with pytest.raises(AuthenticationError):
        auth_service.validate_token("not-a-jwt")


def test_token_expiry_follows_settings(auth_service, settings):
    token = auth_service.register(TEST_EMAIL, TEST_PASSWORD)["access_token"]

    claims = jwt.get_unverified_claims(token)
    payload = auth_service.validate_token(token)
    assert payload.exp == claims["exp"]
    # Sin iat: se compara con la hora actual
    assert 0 < claims["exp"] - time.time() <= settings.jwt_expiration


def test_get_current_user(auth_service):
    registered = auth_service.register(TEST_EMAIL, TEST_PASSWORD)

    user = auth_service.get_current_user(registered["user"].id)
    assert user.email == TEST_EMAIL

    with pytest.raises(NotFoundError):
        auth_service.get_current_user(999)
