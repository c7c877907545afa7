"""Pydantic schemas for the audit log endpoint."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class LogEntryOut(BaseModel):
    """One audit entry as returned by GET /logs (a plain JSON list, oldest first)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    level: str
    message: str
    service: str
    data: dict[str, Any] | None = None
    created_at: datetime | None = None
