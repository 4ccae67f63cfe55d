"""Define el modelo de la tabla 'users' usando SQLAlchemy ORM."""

from sqlalchemy import Column, DateTime, Integer, String, func

from auth_service.db import Base


class User(Base):
    """
    Modelo SQLAlchemy que representa la tabla 'users' en la base de datos.
    Almacena la información de autenticación y el perfil básico de los usuarios.
    """
    __tablename__ = "users"

    # Clave primaria autoincremental
    id = Column(Integer, primary_key=True, index=True)

    # Email del usuario, único e inmutable tras la creación
    email = Column(String(255), unique=True, index=True, nullable=False)

    # Hash bcrypt de la contraseña; nunca sale del servicio de usuarios
    hashed_password = Column(String(255), nullable=False)

    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<User id={self.id} email={self.email!r}>"
