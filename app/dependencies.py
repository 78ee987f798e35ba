from __future__ import annotations

from fastapi import Depends

from app.core.config import Settings, get_settings
from services.content_generator import ContentGeneratorService


def get_content_generator(settings: Settings = Depends(get_settings)) -> ContentGeneratorService:
    return ContentGeneratorService(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        timeout_seconds=settings.generation_timeout_seconds,
        max_output_tokens=settings.generation_max_output_tokens,
    )
