"""Runtime info and host metrics."""

from fastapi import APIRouter

from dockmaster.api.deps import MetricsReaderDep, SystemServiceDep
from dockmaster.schemas.system import SystemInfo, SystemMetrics

router = APIRouter()


@router.get("/info", response_model=SystemInfo)
def get_system_info(system: SystemServiceDep) -> SystemInfo:
    return system.info()


@router.get("/metrics", response_model=SystemMetrics)
def get_system_metrics(metrics: MetricsReaderDep) -> SystemMetrics:
    """Read fresh from procfs on every call."""
    return metrics.read()
