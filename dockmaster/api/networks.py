"""Network endpoints."""

from typing import Any

from fastapi import APIRouter

from dockmaster.api.auth import CurrentUserDep
from dockmaster.api.deps import AuditLogDep, NetworkServiceDep
from dockmaster.schemas.common import MessageResponse
from dockmaster.schemas.networks import CreateNetworkRequest, CreateNetworkResponse, NetworkRecord

router = APIRouter()


@router.get("", response_model=list[NetworkRecord])
def list_networks(networks: NetworkServiceDep) -> list[NetworkRecord]:
    return networks.list_networks()


@router.post("", response_model=CreateNetworkResponse)
def create_network(
    body: CreateNetworkRequest,
    networks: NetworkServiceDep,
    current_user: CurrentUserDep,
    audit: AuditLogDep,
) -> CreateNetworkResponse:
    network_id = networks.create(body)
    audit.record(
        "info",
        "Network created",
        {"network": body.name, "network_id": network_id, "username": current_user.username},
    )
    return CreateNetworkResponse(message="Network created successfully", network_id=network_id)


@router.get("/{network_id}", response_model=dict[str, Any])
def get_network(network_id: str, networks: NetworkServiceDep) -> dict[str, Any]:
    return networks.inspect(network_id)


@router.get("/{network_id}/inspect", response_model=dict[str, Any])
def inspect_network(network_id: str, networks: NetworkServiceDep) -> dict[str, Any]:
    return networks.inspect(network_id)


@router.delete("/{network_id}", response_model=MessageResponse)
def delete_network(
    network_id: str,
    networks: NetworkServiceDep,
    current_user: CurrentUserDep,
    audit: AuditLogDep,
) -> MessageResponse:
    networks.remove(network_id)
    audit.record("info", "Network deleted", {"network": network_id, "username": current_user.username})
    return MessageResponse(message="Network deleted successfully")
