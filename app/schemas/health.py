"""Health check response body."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: Literal["ok", "degraded"] = Field(
        description="ok when every dependency answers, degraded otherwise"
    )
    version: str = Field(description="Application version (FastAPI app.version)")
    environment: str = Field(description="APP_ENV of the running process")
    database: Literal["connected", "disconnected"]
