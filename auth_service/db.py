"""Configuración de la conexión a la base de datos usando SQLAlchemy."""

import logging

from fastapi import HTTPException, Request
from sqlalchemy import create_engine, exc, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from auth_service.config import Settings

logger = logging.getLogger(__name__)

# Clase base para los modelos declarativos (User hereda de aquí)
Base = declarative_base()


def build_engine(settings: Settings) -> Engine:
    """
    Crea el motor (Engine) de SQLAlchemy a partir de la configuración.
    pool_pre_ping=True ayuda a manejar conexiones inactivas en el pool.
    """
    url = settings.sqlalchemy_database_url
    if url.startswith("sqlite"):
        # SQLite en memoria: una sola conexión compartida entre hilos
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, pool_pre_ping=True)


def build_session_factory(engine: Engine) -> sessionmaker:
    """Fábrica de sesiones: cada petición web usa su propia sesión."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def check_connection(engine: Engine) -> bool:
    """Intenta conectar y ejecutar SELECT 1 para verificar credenciales y disponibilidad."""
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        logger.info("Database connection established successfully.")
        return True
    except exc.SQLAlchemyError as e:
        logger.error(f"Database connection failed: {e}", exc_info=True)
        return False


# --- Función de Dependencia para FastAPI ---
def get_db(request: Request):
    """
    Generador de dependencia de FastAPI para obtener una sesión de base de datos.
    Asegura que la sesión se cierre correctamente después de cada petición.
    """
    session_factory = getattr(request.app.state, "session_factory", None)
    if session_factory is None:
        logger.error("Database session factory is not initialised.")
        raise HTTPException(status_code=503, detail="Database service unavailable")

    db = session_factory()
    try:
        yield db
    except exc.SQLAlchemyError as e:
        logger.error(f"Database error during request: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Internal database error")
    finally:
        db.close()
