from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = Field(description="Health status")


class ConfigResponse(BaseModel):
    target_configured: bool = Field(
        description="Whether TARGET_ENDPOINT is set; the URL itself is not exposed"
    )
    poll_interval_s: float = Field(gt=0)


class CheckResponse(BaseModel):
    success: bool
    message: str
    data: Any | None = None
    error: Any | None = None
