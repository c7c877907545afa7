"""Pydantic schemas for volumes."""

from pydantic import BaseModel, Field, field_validator

from dockmaster.schemas.common import CliLine, DockerRecord

# Where the local driver keeps volume data when the CLI does not print a mountpoint.
DEFAULT_VOLUME_ROOT = "/var/lib/docker/volumes"


class VolumeLine(CliLine):
    """Raw `docker volume ls` line."""

    name: str
    driver: str = "local"
    mountpoint: str = ""
    created_at: str = ""
    scope: str = "local"
    labels: str = ""
    options: str = ""


class VolumeRecord(DockerRecord):
    name: str
    driver: str = "local"
    mountpoint: str = ""
    created_at: str = ""
    scope: str = "local"
    labels: dict[str, str] = Field(default_factory=dict)
    options: dict[str, str] = Field(default_factory=dict)


class CreateVolumeRequest(BaseModel):
    name: str | None = Field(default=None, max_length=255, description="Generated by the runtime when omitted")
    driver: str | None = Field(default=None, max_length=128)
    driver_opts: dict[str, str] = Field(default_factory=dict)
    labels: dict[str, str] = Field(default_factory=dict)

    @field_validator("name", "driver")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()


class CreateVolumeResponse(BaseModel):
    message: str
    name: str
