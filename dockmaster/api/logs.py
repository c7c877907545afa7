"""Audit log listing (admin only)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from dockmaster.api.auth import require_admin
from dockmaster.api.deps import AuditLogDep
from dockmaster.schemas.auth import CurrentUser
from dockmaster.schemas.logs import LogEntryOut
from dockmaster.services.audit import DEFAULT_RECENT_LIMIT

router = APIRouter()


@router.get("", response_model=list[LogEntryOut])
def list_logs(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    audit: AuditLogDep,
    service: str | None = None,
    limit: int = Query(default=DEFAULT_RECENT_LIMIT, ge=1, le=1000),
) -> list[LogEntryOut]:
    return audit.recent(limit=limit, service=service)
