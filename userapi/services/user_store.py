"""Persistence of user records on top of a SQLAlchemy session."""

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from userapi.core.errors import EmailAlreadyTaken, PersistenceError
from userapi.db.models import User

logger = logging.getLogger(__name__)


class UserStore:
    """Narrow CRUD interface over the ``users`` table.

    Writes commit immediately.  A rejected write is rolled back before the
    error propagates, so the session is usable again afterwards.
    """

    def __init__(self, db: Session):
        self.db = db

    # ── reads ────────────────────────────────────────────────────────────

    def find_by_id(self, user_id: uuid.UUID) -> User | None:
        return self.db.get(User, user_id)

    def find_by_email(self, email: str) -> User | None:
        return self.db.execute(
            select(User).where(User.email == email)
        ).scalar_one_or_none()

    def email_taken(self, email: str, ignore_id: uuid.UUID | None = None) -> bool:
        query = select(User.id).where(User.email == email)
        if ignore_id is not None:
            query = query.where(User.id != ignore_id)
        return self.db.execute(query.limit(1)).first() is not None

    def all(self) -> list[User]:
        return list(self.db.execute(select(User).order_by(User.created_at)).scalars())

    def paginate(self, page: int, per_page: int) -> tuple[list[User], int]:
        """Return one page of users (1-based *page*) and the total count."""
        total = self.db.execute(select(func.count()).select_from(User)).scalar_one()
        users = self.db.execute(
            select(User)
            .order_by(User.created_at)
            .offset((page - 1) * per_page)
            .limit(per_page)
        ).scalars()
        return list(users), total

    # ── writes ───────────────────────────────────────────────────────────

    def create(self, name: str, email: str, hashed_password: str) -> User:
        user = User(name=name, email=email, hashed_password=hashed_password)
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
        except IntegrityError as exc:
            self.db.rollback()
            logger.info("Write rejected by unique constraint: %s", exc.orig)
            raise EmailAlreadyTaken() from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Database write failed: %s", exc)
            raise PersistenceError(str(exc)) from exc
