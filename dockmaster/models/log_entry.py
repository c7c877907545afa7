"""ORM model for the capped, append-only audit log."""

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text, func

from dockmaster.models.base import Base


class LogEntry(Base):
    __tablename__ = "log_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    level = Column(String(16), nullable=False, default="info")
    message = Column(Text, nullable=False)
    service = Column(String(64), nullable=False, index=True)
    data = Column(JSON, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
