"""Credential store: one user record per username, persisted through SQLAlchemy."""

import threading
from datetime import UTC, datetime

from sqlalchemy.orm import Session, sessionmaker

from dockmaster.models.user import User
from dockmaster.schemas.auth import StoredUser


class CredentialStore:
    """
    Thread-safe access to the users table.

    Callers get detached StoredUser snapshots, never ORM objects, so a record
    read on one request thread can be handed to another safely.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory
        self._lock = threading.Lock()

    def get(self, username: str) -> StoredUser | None:
        with self._lock, self._session_factory() as db:
            user = db.query(User).filter(User.username == username).first()
            return StoredUser.model_validate(user) if user is not None else None

    def upsert(self, user: StoredUser) -> StoredUser:
        """Insert or replace by username. Bumps updated_at; keeps created_at of an existing record."""
        now = datetime.now(UTC)
        with self._lock, self._session_factory() as db:
            existing = db.query(User).filter(User.username == user.username).first()
            if existing is None:
                existing = User(username=user.username, created_at=user.created_at or now)
                db.add(existing)
            existing.password_hash = user.password_hash
            existing.role = user.role
            existing.updated_at = now
            db.commit()
            return StoredUser.model_validate(existing)

    def create_if_absent(self, username: str, password_hash: str, role: str) -> bool:
        """Insert a new record; False (and no change) when username already exists."""
        now = datetime.now(UTC)
        with self._lock, self._session_factory() as db:
            if db.query(User).filter(User.username == username).first() is not None:
                return False
            db.add(
                User(
                    username=username,
                    password_hash=password_hash,
                    role=role,
                    created_at=now,
                    updated_at=now,
                )
            )
            db.commit()
            return True

    def list_users(self) -> list[StoredUser]:
        with self._lock, self._session_factory() as db:
            users = db.query(User).order_by(User.username).all()
            return [StoredUser.model_validate(u) for u in users]
