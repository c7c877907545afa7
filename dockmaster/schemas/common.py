"""Shared response bodies and base models for runtime records."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel, to_pascal


class MessageResponse(BaseModel):
    message: str


class DockerRecord(BaseModel):
    """Response record serialized with Docker Engine API style keys (Id, RepoTags, ...)."""

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)


class CamelRecord(BaseModel):
    """Response record serialized with camelCase keys (cpuPerc, apiVersion, ...)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CliLine(BaseModel):
    """One `--format '{{json .}}'` object emitted by the runtime CLI. Unknown keys are ignored."""

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True, extra="ignore")
