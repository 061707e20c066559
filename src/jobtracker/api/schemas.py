from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class StatusUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    status: str | None = None


class HealthResponse(BaseModel):
    status: str
    backend: str
