# tests/conftest.py
import os

# La app a nivel de módulo (auth_service.main.app) lee el entorno al importarse
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "tests-secret-key")

import pytest
from fastapi.testclient import TestClient

from auth_service.auth import AuthService
from auth_service.config import Settings
from auth_service.db import Base, build_engine, build_session_factory
from auth_service.main import create_app
from auth_service.repository import UserRepository
from auth_service.users import UserService

TEST_EMAIL = "test@example.com"
TEST_PASSWORD = "Test@1234"


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://", jwt_secret="tests-secret-key")


@pytest.fixture
def engine(settings):
    """Base de datos SQLite en memoria, nueva para cada prueba."""
    engine = build_engine(settings)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = build_session_factory(engine)()
    yield session
    session.close()


@pytest.fixture
def user_service(db_session, settings):
    return UserService(UserRepository(db_session), bcrypt_rounds=settings.bcrypt_rounds)


@pytest.fixture
def auth_service(user_service, settings):
    return AuthService(user_service, settings)


@pytest.fixture
def client(settings, engine):
    app = create_app(settings=settings, engine=engine)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def registered_user(client):
    """
    Registra un usuario por HTTP y devuelve el cuerpo de la respuesta
    (access_token + user).
    """
    payload = {"email": TEST_EMAIL, "password": TEST_PASSWORD, "firstName": "John", "lastName": "Doe"}
    r = client.post("/auth/register", json=payload)
    assert r.status_code == 201, r.text
    return r.json()


# Fixture de utilidad para las cabeceras de autorización
@pytest.fixture
def auth_headers(registered_user):
    return {"Authorization": f"Bearer {registered_user['access_token']}"}
