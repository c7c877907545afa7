"""Pydantic schemas for networks."""

from pydantic import BaseModel, Field, field_validator

from dockmaster.schemas.common import CliLine, DockerRecord


class NetworkLine(CliLine):
    """Raw `docker network ls` line. IPv6 and Internal print as "true"/"false"."""

    id: str = Field(alias="ID")
    name: str = ""
    driver: str = ""
    scope: str = ""
    created_at: str = ""
    ipv6: str = Field(default="false", alias="IPv6")
    internal: str = "false"
    labels: str = ""


class NetworkRecord(DockerRecord):
    id: str
    name: str = ""
    driver: str = ""
    scope: str = ""
    created: int | None = None
    enable_ipv6: bool = Field(default=False, alias="EnableIPv6")
    internal: bool = False
    labels: dict[str, str] = Field(default_factory=dict)


class IPAMSubnet(BaseModel):
    subnet: str = Field(..., min_length=1)
    gateway: str | None = None


class IPAMConfig(BaseModel):
    driver: str | None = None
    config: list[IPAMSubnet] = Field(default_factory=list)
    options: dict[str, str] = Field(default_factory=dict)


class CreateNetworkRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    driver: str | None = Field(default=None, max_length=128)
    options: dict[str, str] = Field(default_factory=dict)
    labels: dict[str, str] = Field(default_factory=dict)
    internal: bool = False
    enable_ipv6: bool = False
    ipam: IPAMConfig | None = None

    @field_validator("name")
    @classmethod
    def name_non_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must be non-empty")
        return v.strip()


class CreateNetworkResponse(BaseModel):
    message: str
    network_id: str
