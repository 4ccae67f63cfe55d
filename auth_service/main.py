import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from sqlalchemy.engine import Engine

# Importaciones locales
from auth_service import models  # noqa: F401  (registra la tabla 'users' en Base.metadata)
from auth_service import schemas
from auth_service.auth import AuthService
from auth_service.config import Settings
from auth_service.db import Base, build_engine, build_session_factory, check_connection
from auth_service.dependencies import get_auth_service, get_current_user_id, get_user_service
from auth_service.exceptions import AuthServiceError
from auth_service.users import UserService

# Configura logger
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# --- Métricas Prometheus ---
REQUEST_COUNT = Counter(
    "auth_requests_total",
    "Total requests processed by Auth Service",
    ["method", "endpoint", "status_code"]
)
REQUEST_LATENCY = Histogram(
    "auth_request_latency_seconds",
    "Request latency in seconds for Auth Service",
    ["endpoint"]
)

auth_router = APIRouter(prefix="/auth", tags=["Authentication"])
users_router = APIRouter(prefix="/users", tags=["Users"])
internal_router = APIRouter(tags=["Internal"])
monitoring_router = APIRouter(tags=["Monitoring"])


# --- Endpoints de API ---

@auth_router.post("/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user: schemas.UserCreate, auth_service: AuthService = Depends(get_auth_service)):
    """
    Registers a new user with email and password.
    Returns an access token together with the created user (without password hash).
    """
    return auth_service.register(
        user.email,
        user.password,
        first_name=user.first_name,
        last_name=user.last_name,
    )


@auth_router.post("/login", response_model=schemas.AuthResponse)
def login(credentials: schemas.LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    """
    Authenticates a user by email and password.
    Returns a JWT access token upon successful authentication.
    """
    return auth_service.login(credentials.email, credentials.password)


@auth_router.get("/me", response_model=schemas.UserResponse)
def me(
    user_id: int = Depends(get_current_user_id),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Returns the user that owns the bearer token."""
    return auth_service.get_current_user(user_id)


@users_router.patch("/me", response_model=schemas.UserResponse)
def update_me(
    changes: schemas.UserUpdate,
    user_id: int = Depends(get_current_user_id),
    user_service: UserService = Depends(get_user_service),
):
    """Updates first/last name of the authenticated user. The email cannot be changed."""
    return user_service.update(user_id, changes.to_changes())


@users_router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
def delete_me(
    user_id: int = Depends(get_current_user_id),
    user_service: UserService = Depends(get_user_service),
):
    """Deletes the authenticated user's account."""
    user_service.delete(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@internal_router.get("/verify", response_model=schemas.TokenPayload)
def verify(token: str, auth_service: AuthService = Depends(get_auth_service)):
    """
    Valida un token JWT (pasado como query parameter 'token') y devuelve su payload.
    """
    return auth_service.validate_token(token)


# --- Endpoints de Salud y Métricas ---

@monitoring_router.get("/metrics")
def metrics():
    """Exposes application metrics for Prometheus."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@monitoring_router.get("/health")
def health_check(request: Request):
    """Performs a basic health check of the service and its database."""
    if not check_connection(request.app.state.engine):
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Database connection error")
    return {"status": "ok", "service": "auth_service", "database": "ok"}


# --- Manejo de errores de dominio ---

async def handle_auth_service_error(request: Request, exc: AuthServiceError):
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=headers)


# --- Middleware para Métricas ---

def endpoint_label(request: Request) -> str:
    """Plantilla de la ruta atendida (ej. '/users/me'); las rutas inexistentes comparten una etiqueta."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


async def metrics_middleware(request: Request, call_next):
    start_time = time.time()
    status_code = 500 # Default a 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        latency = time.time() - start_time
        endpoint = endpoint_label(request)
        REQUEST_LATENCY.labels(endpoint=endpoint).observe(latency)
        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=status_code
        ).inc()


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    """
    Construye la aplicación: configuración, motor de BD, fábrica de sesiones,
    rutas y manejadores. Todo se compone aquí una única vez al arrancar.
    """
    settings = settings or Settings.from_env()
    engine = engine or build_engine(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Crea tablas si no existen al iniciar
        try:
            Base.metadata.create_all(bind=engine)
            logger.info("Database tables verified/created.")
        except Exception as e:
            logger.error(f"Error initializing database: {e}", exc_info=True)
        check_connection(engine)
        yield
        engine.dispose()

    app = FastAPI(
        title="Auth Service",
        description="Handles user registration, authentication, and token verification.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    app.middleware("http")(metrics_middleware)
    app.add_exception_handler(AuthServiceError, handle_auth_service_error)

    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(internal_router)
    app.include_router(monitoring_router)

    return app


app = create_app()
