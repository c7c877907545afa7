"""Pydantic schemas for images and registry search."""

from pydantic import AliasChoices, BaseModel, Field, field_validator

from dockmaster.schemas.common import CliLine, DockerRecord


class ImageLine(CliLine):
    """Raw `docker images` line."""

    id: str = Field(alias="ID")
    repository: str = ""
    tag: str = ""
    created_at: str = ""
    size: str = ""


class ImageRecord(DockerRecord):
    id: str
    repo_tags: list[str] = Field(default_factory=list)
    created: int | None = None
    size: int = 0


class RegistryResult(BaseModel):
    """One Docker Hub repository search hit."""

    model_config = {"extra": "ignore"}

    name: str = Field(default="", validation_alias=AliasChoices("repo_name", "name"))
    description: str = Field(default="", validation_alias=AliasChoices("short_description", "description"))
    star_count: int = 0
    is_official: bool = False
    is_automated: bool = False

    @field_validator("description", mode="before")
    @classmethod
    def none_to_empty(cls, v: str | None) -> str:
        return v or ""


class ImageSearchResponse(BaseModel):
    local: list[ImageRecord] = Field(default_factory=list)
    docker_hub: list[RegistryResult] = Field(default_factory=list)


class PullImageRequest(BaseModel):
    image: str = Field(..., min_length=1, max_length=512)
    tag: str | None = Field(default=None, max_length=128)

    @field_validator("image")
    @classmethod
    def image_non_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("image must be non-empty")
        return v.strip()

    @field_validator("tag")
    @classmethod
    def blank_tag_to_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()


class PullImageResponse(BaseModel):
    message: str
    output: str = ""
