"""Capped audit log of security and resource events, stored in log_entries."""

import logging
import threading
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from dockmaster.models.log_entry import LogEntry
from dockmaster.schemas.logs import LogEntryOut

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 1000
DEFAULT_RECENT_LIMIT = 100


class AuditLog:
    """
    Append-only log trimmed to the newest max_entries rows.

    record() never raises: a storage failure is logged and the caller's
    request carries on.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        service: str,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        enabled: bool = True,
    ) -> None:
        self._session_factory = session_factory
        self.service = service
        self.max_entries = max_entries
        self.enabled = enabled
        self._lock = threading.Lock()

    def record(self, level: str, message: str, data: dict[str, Any] | None = None) -> None:
        if not self.enabled:
            return
        try:
            with self._lock, self._session_factory() as db:
                db.add(
                    LogEntry(
                        level=level,
                        message=message,
                        service=self.service,
                        data=data,
                        created_at=datetime.now(UTC),
                    )
                )
                db.flush()
                cutoff = (
                    db.query(LogEntry.id)
                    .order_by(LogEntry.id.desc())
                    .offset(self.max_entries)
                    .limit(1)
                    .scalar()
                )
                if cutoff is not None:
                    db.query(LogEntry).filter(LogEntry.id <= cutoff).delete(synchronize_session=False)
                db.commit()
        except SQLAlchemyError as e:
            logger.error("Failed to write audit entry", extra={"audit_message": message, "error": str(e)})

    def recent(self, limit: int = DEFAULT_RECENT_LIMIT, service: str | None = None) -> list[LogEntryOut]:
        """Newest `limit` entries, optionally for one service, returned oldest first."""
        with self._session_factory() as db:
            query = db.query(LogEntry)
            if service:
                query = query.filter(LogEntry.service == service)
            rows = query.order_by(LogEntry.id.desc()).limit(limit).all()
            return [LogEntryOut.model_validate(row) for row in reversed(rows)]
