"""Dependencies that hand out the per-app service instances stored on app.state."""

from typing import Annotated

from fastapi import Depends, Request

from dockmaster.services.audit import AuditLog
from dockmaster.services.auth import AuthService
from dockmaster.services.containers import ContainerService
from dockmaster.services.images import ImageService
from dockmaster.services.metrics import MetricsReader
from dockmaster.services.networks import NetworkService
from dockmaster.services.system import SystemService
from dockmaster.services.volumes import VolumeService


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth


def get_audit_log(request: Request) -> AuditLog:
    return request.app.state.audit


def get_container_service(request: Request) -> ContainerService:
    return request.app.state.containers


def get_image_service(request: Request) -> ImageService:
    return request.app.state.images


def get_volume_service(request: Request) -> VolumeService:
    return request.app.state.volumes


def get_network_service(request: Request) -> NetworkService:
    return request.app.state.networks


def get_system_service(request: Request) -> SystemService:
    return request.app.state.system


def get_metrics_reader(request: Request) -> MetricsReader:
    return request.app.state.metrics


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
AuditLogDep = Annotated[AuditLog, Depends(get_audit_log)]
ContainerServiceDep = Annotated[ContainerService, Depends(get_container_service)]
ImageServiceDep = Annotated[ImageService, Depends(get_image_service)]
VolumeServiceDep = Annotated[VolumeService, Depends(get_volume_service)]
NetworkServiceDep = Annotated[NetworkService, Depends(get_network_service)]
SystemServiceDep = Annotated[SystemService, Depends(get_system_service)]
MetricsReaderDep = Annotated[MetricsReader, Depends(get_metrics_reader)]
