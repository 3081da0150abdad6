"""Pydantic schema for the health check payload."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Payload of GET /health, wrapped in the usual envelope."""

    status: Literal["ok"] = Field(default="ok", description="Service status")
    environment: str = Field(description="Current app environment (dev or prod)")
    database: Literal["connected", "disconnected"] = Field(
        description="Whether a trivial query against the database succeeded",
    )
