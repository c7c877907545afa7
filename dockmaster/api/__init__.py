"""API routes. Everything except /health and POST /auth/login requires a bearer token."""

from fastapi import APIRouter, Depends

from dockmaster.api import auth, containers, health, images, logs, networks, system, volumes
from dockmaster.api.auth import get_current_user

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.public_router, prefix="/auth", tags=["auth"])

protected = APIRouter(dependencies=[Depends(get_current_user)])
protected.include_router(auth.router, prefix="/auth", tags=["auth"])
protected.include_router(containers.router, prefix="/containers", tags=["containers"])
protected.include_router(images.router, prefix="/images", tags=["images"])
protected.include_router(volumes.router, prefix="/volumes", tags=["volumes"])
protected.include_router(networks.router, prefix="/networks", tags=["networks"])
protected.include_router(system.router, prefix="/system", tags=["system"])
protected.include_router(logs.router, prefix="/logs", tags=["logs"])

router.include_router(protected)
