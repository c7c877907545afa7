"""Pydantic schemas for containers: CLI lines, API records, run requests, stats and logs."""

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from dockmaster.schemas.common import CamelRecord, CliLine, DockerRecord

RestartPolicy = Literal["no", "always", "unless-stopped", "on-failure"]


class ContainerLine(CliLine):
    """Raw `docker ps` line. Every value is a string as printed by the CLI."""

    id: str = Field(alias="ID")
    names: str = ""
    image: str = ""
    command: str = ""
    created_at: str = ""
    ports: str = ""
    labels: str = ""
    state: str = ""
    status: str = ""
    mounts: str = ""
    size: str = ""


class PortBinding(DockerRecord):
    ip: str | None = Field(default=None, alias="IP")
    public_port: int | None = None
    private_port: int
    type: str = "tcp"


class ContainerRecord(DockerRecord):
    id: str
    names: list[str] = Field(default_factory=list)
    image: str = ""
    command: str = ""
    created: int | None = None
    ports: list[PortBinding] = Field(default_factory=list)
    labels: dict[str, str] = Field(default_factory=dict)
    state: str = ""
    status: str = ""
    mounts: list[str] = Field(default_factory=list)


class PortMapping(BaseModel):
    host_port: str = Field(..., min_length=1)
    container_port: str = Field(..., min_length=1)
    protocol: Literal["tcp", "udp", "sctp"] = "tcp"


class VolumeMapping(BaseModel):
    host_path: str = Field(..., min_length=1)
    container_path: str = Field(..., min_length=1)
    read_only: bool = False


class RunContainerRequest(BaseModel):
    """
    Parameters for `docker run -d`.

    ports accepts the dashboard's {"8080": "80/tcp"} map or a list of PortMapping;
    environment accepts ["KEY=VALUE", ...] or {"KEY": "VALUE"};
    volumes accepts ["host:container[:ro]", ...] or a list of VolumeMapping.
    """

    image: str = Field(..., min_length=1, max_length=512)
    name: str | None = Field(default=None, max_length=255)
    ports: dict[str, str] | list[PortMapping] | None = None
    environment: list[str] | dict[str, str] | None = None
    volumes: list[str | VolumeMapping] | None = None
    command: list[str] | str | None = None
    working_dir: str | None = None
    restart_policy: RestartPolicy | None = None

    @field_validator("name", "working_dir")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("image")
    @classmethod
    def image_non_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("image must be non-empty")
        return v.strip()


class RunContainerResponse(BaseModel):
    message: str
    container_id: str


class StatsLine(CliLine):
    """Raw `docker stats --no-stream` line."""

    id: str = Field(default="", alias="ID")
    name: str = ""
    cpu_perc: str = Field(default="", alias="CPUPerc")
    mem_usage: str = ""
    mem_perc: str = ""
    net_io: str = Field(default="", alias="NetIO")
    block_io: str = Field(default="", alias="BlockIO")
    pids: str = Field(default="", alias="PIDs")


class ContainerStats(CamelRecord):
    id: str
    name: str = ""
    cpu_perc: float = 0.0
    mem_usage: int = 0
    mem_limit: int = 0
    mem_perc: float = 0.0
    net_rx: int = 0
    net_tx: int = 0
    block_read: int = 0
    block_write: int = 0
    pids: int = 0


class LogLine(BaseModel):
    timestamp: str | None = Field(default=None, description="RFC 3339 timestamp printed by the runtime")
    stream: Literal["stdout", "stderr"] = "stdout"
    log: str


ContainerInspect = dict[str, Any]
