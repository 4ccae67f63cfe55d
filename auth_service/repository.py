"""Acceso a la tabla 'users'. Las búsquedas devuelven None si no hay fila; los errores de escritura se propagan."""

from typing import Optional

from sqlalchemy import exc
from sqlalchemy.orm import Session

from auth_service.models import User


class UserRepository:
    """Operaciones CRUD sobre User con una sesión SQLAlchemy inyectada."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def find_by_id(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)

    def create(self, **fields) -> User:
        user = User(**fields)
        self.db.add(user)
        self._commit()
        self.db.refresh(user)
        return user

    def save(self, user: User) -> User:
        self.db.add(user)
        self._commit()
        self.db.refresh(user)
        return user

    def delete(self, user: User) -> None:
        self.db.delete(user)
        self._commit()

    def _commit(self) -> None:
        try:
            self.db.commit()
        except exc.SQLAlchemyError:
            # La sesión queda inutilizable hasta el rollback
            self.db.rollback()
            raise
