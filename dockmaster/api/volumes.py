"""Volume endpoints."""

from typing import Any

from fastapi import APIRouter

from dockmaster.api.auth import CurrentUserDep
from dockmaster.api.deps import AuditLogDep, VolumeServiceDep
from dockmaster.schemas.common import MessageResponse
from dockmaster.schemas.volumes import CreateVolumeRequest, CreateVolumeResponse, VolumeRecord

router = APIRouter()


@router.get("", response_model=list[VolumeRecord])
def list_volumes(volumes: VolumeServiceDep) -> list[VolumeRecord]:
    return volumes.list_volumes()


@router.post("", response_model=CreateVolumeResponse)
def create_volume(
    body: CreateVolumeRequest,
    volumes: VolumeServiceDep,
    current_user: CurrentUserDep,
    audit: AuditLogDep,
) -> CreateVolumeResponse:
    name = volumes.create(body)
    audit.record("info", "Volume created", {"volume": name, "username": current_user.username})
    return CreateVolumeResponse(message="Volume created successfully", name=name)


@router.get("/{name}", response_model=dict[str, Any])
def get_volume(name: str, volumes: VolumeServiceDep) -> dict[str, Any]:
    return volumes.inspect(name)


@router.delete("/{name}", response_model=MessageResponse)
def delete_volume(
    name: str,
    volumes: VolumeServiceDep,
    current_user: CurrentUserDep,
    audit: AuditLogDep,
    force: bool = False,
) -> MessageResponse:
    """409 when a container still uses the volume and force is not set."""
    volumes.remove(name, force=force)
    audit.record("info", "Volume deleted", {"volume": name, "force": force, "username": current_user.username})
    return MessageResponse(message="Volume deleted successfully")
