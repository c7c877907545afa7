"""Pydantic schemas for health check responses."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response body for the health check endpoint."""

    status: Literal["healthy"] = Field(default="healthy", description="Service status")
    service: str = Field(description="Name of the answering service")
