from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from services.content_generator import ContentKind


class TrackPromoRequest(BaseModel):
    track_title: str = Field(min_length=1, max_length=200)
    artist: str = Field(min_length=1, max_length=200)
    vibe: str = Field(min_length=1, max_length=100)
    persist: bool = True


class GrowthContentRequest(BaseModel):
    topic: str = Field(min_length=1, max_length=200)
    content_format: str = Field(default="educational", min_length=1, max_length=50)
    persist: bool = True


class GeneratedContentResponse(BaseModel):
    id: int | None = None
    content_type: ContentKind
    content: dict[str, Any]


class StoredContentResponse(BaseModel):
    id: int
    content_type: str
    input_data: dict[str, Any]
    output_data: dict[str, Any]
    created_at: datetime | None = None
