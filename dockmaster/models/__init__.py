"""SQLAlchemy ORM models."""

from dockmaster.models.base import Base
from dockmaster.models.log_entry import LogEntry
from dockmaster.models.user import User

__all__ = ["Base", "LogEntry", "User"]
