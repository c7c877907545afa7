"""Pydantic schemas for runtime info and host metrics."""

from pydantic import BaseModel

from dockmaster.schemas.common import CamelRecord


class ContainerCounts(BaseModel):
    total: int = 0
    running: int = 0
    paused: int = 0
    stopped: int = 0


class RuntimeVersion(CamelRecord):
    version: str = ""
    api_version: str = ""
    go_version: str = ""


class HostSummary(CamelRecord):
    total_memory: int = 0
    cpus: int = 0
    os_type: str = ""
    architecture: str = ""


class SystemInfo(BaseModel):
    """Response for GET /system/info."""

    containers: ContainerCounts
    images: int = 0
    version: RuntimeVersion | None = None
    system: HostSummary


class CpuMetrics(BaseModel):
    usage: float = 0.0
    user_time: int = 0
    system_time: int = 0
    idle_time: int = 0
    cores: int = 0


class MemoryMetrics(BaseModel):
    total: int = 0
    used: int = 0
    free: int = 0
    available: int = 0
    usage: float = 0.0
    buffers: int = 0
    cached: int = 0


class DiskMetrics(BaseModel):
    total: int = 0
    used: int = 0
    free: int = 0
    usage: float = 0.0
    read_ops: int = 0
    write_ops: int = 0
    read_bytes: int = 0
    write_bytes: int = 0


class NetworkMetrics(BaseModel):
    bytes_received: int = 0
    bytes_sent: int = 0
    packets_received: int = 0
    packets_sent: int = 0


class LoadAverage(BaseModel):
    load1: float = 0.0
    load5: float = 0.0
    load15: float = 0.0


class SystemMetrics(BaseModel):
    """Point-in-time host metrics for GET /system/metrics. Byte values are bytes; usage values are percent."""

    cpu: CpuMetrics
    memory: MemoryMetrics
    disk: DiskMetrics
    network: NetworkMetrics
    load: LoadAverage
    uptime: int = 0
    timestamp: int
