from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    database: Literal["connected", "disconnected"]
    generator: Literal["configured", "missing_credential"]
    timestamp: datetime
    version: str


class StoredHealthCheckResponse(BaseModel):
    id: int
    service_status: dict[str, str]
    checked_at: datetime | None = None
