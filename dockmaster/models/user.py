"""ORM model for dashboard users (credentials and role)."""

from sqlalchemy import Column, DateTime, String, func

from dockmaster.models.base import Base


class User(Base):
    """
    User account for JWT authentication.

    role: 'admin' or 'user'. Keyed by username, so one record per username.
    """

    __tablename__ = "users"

    username = Column(String(255), primary_key=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="user")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
