# backend/app/schemas/health.py
from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    model_config = ConfigDict(extra="forbid")

    status: str = Field(description="Health status")
    service: str = Field(description="Service name")
    version: str = Field(description="API version")
    database: str = Field(description="Database reachability")
    timestamp: str = Field(description="UTC ISO8601Z timestamp of the health response")
