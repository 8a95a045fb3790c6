"""Response model for GET /health."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """
    Health check response showing service and dependency status.

    status: healthy (all up), degraded (generator down), unhealthy (store down)
    """
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    generator: str = Field(description="Text generation provider: available, unavailable")
    uptime_seconds: float = Field(description="Seconds since service started")
