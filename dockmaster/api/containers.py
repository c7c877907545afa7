"""Container endpoints."""

from typing import Any

from fastapi import APIRouter, Query

from dockmaster.api.auth import CurrentUserDep
from dockmaster.api.deps import AuditLogDep, ContainerServiceDep
from dockmaster.schemas.common import MessageResponse
from dockmaster.schemas.containers import (
    ContainerRecord,
    ContainerStats,
    LogLine,
    RunContainerRequest,
    RunContainerResponse,
)

router = APIRouter()


@router.get("", response_model=list[ContainerRecord])
def list_containers(
    containers: ContainerServiceDep,
    all: bool = Query(default=False, description="Include stopped containers"),
) -> list[ContainerRecord]:
    return containers.list_containers(all=all)


@router.post("", response_model=RunContainerResponse)
@router.post("/run", response_model=RunContainerResponse)
def run_container(
    body: RunContainerRequest,
    containers: ContainerServiceDep,
    current_user: CurrentUserDep,
    audit: AuditLogDep,
) -> RunContainerResponse:
    container_id = containers.run_container(body)
    audit.record(
        "info",
        "Container created and started",
        {"container": container_id, "image": body.image, "username": current_user.username},
    )
    return RunContainerResponse(
        message="Container created and started successfully",
        container_id=container_id,
    )


@router.post("/{container_id}/start", response_model=MessageResponse)
def start_container(
    container_id: str,
    containers: ContainerServiceDep,
    current_user: CurrentUserDep,
    audit: AuditLogDep,
) -> MessageResponse:
    containers.start(container_id)
    audit.record("info", "Container started", {"container": container_id, "username": current_user.username})
    return MessageResponse(message="Container started successfully")


@router.post("/{container_id}/stop", response_model=MessageResponse)
def stop_container(
    container_id: str,
    containers: ContainerServiceDep,
    current_user: CurrentUserDep,
    audit: AuditLogDep,
) -> MessageResponse:
    containers.stop(container_id)
    audit.record("info", "Container stopped", {"container": container_id, "username": current_user.username})
    return MessageResponse(message="Container stopped successfully")


@router.post("/{container_id}/restart", response_model=MessageResponse)
def restart_container(
    container_id: str,
    containers: ContainerServiceDep,
    current_user: CurrentUserDep,
    audit: AuditLogDep,
) -> MessageResponse:
    containers.restart(container_id)
    audit.record("info", "Container restarted", {"container": container_id, "username": current_user.username})
    return MessageResponse(message="Container restarted successfully")


@router.delete("/{container_id}", response_model=MessageResponse)
def delete_container(
    container_id: str,
    containers: ContainerServiceDep,
    current_user: CurrentUserDep,
    audit: AuditLogDep,
    force: bool = False,
) -> MessageResponse:
    containers.remove(container_id, force=force)
    audit.record(
        "info",
        "Container deleted",
        {"container": container_id, "force": force, "username": current_user.username},
    )
    return MessageResponse(message="Container deleted successfully")


@router.get("/{container_id}", response_model=dict[str, Any])
def get_container(container_id: str, containers: ContainerServiceDep) -> dict[str, Any]:
    """Full `docker container inspect` document."""
    return containers.inspect(container_id)


@router.get("/{container_id}/stats", response_model=ContainerStats)
def get_container_stats(container_id: str, containers: ContainerServiceDep) -> ContainerStats:
    return containers.stats(container_id)


@router.get("/{container_id}/logs", response_model=list[LogLine])
def get_container_logs(
    container_id: str,
    containers: ContainerServiceDep,
    tail: str | None = Query(default=None, description="Number of lines, or 'all' (default 100)"),
) -> list[LogLine]:
    return containers.logs(container_id, tail)
