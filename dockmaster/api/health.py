"""Health check endpoint (no auth)."""

from fastapi import APIRouter, Request

from dockmaster.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(request: Request) -> HealthResponse:
    """Used by load balancers and monitoring; does not touch the runtime or the database."""
    return HealthResponse(service=request.app.state.settings.SERVICE_NAME)
