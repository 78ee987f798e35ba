from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, get_settings
from app.db.session import get_session
from app.dependencies import get_content_generator
from schemas.health import HealthResponse, StoredHealthCheckResponse
from services.content_generator import ContentGeneratorService
from services.content_store import ContentStoreError, ContentStoreService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_settings),
    generator: ContentGeneratorService = Depends(get_content_generator),
    session: AsyncSession = Depends(get_session),
) -> HealthResponse:
    try:
        await session.execute(text("SELECT 1"))
        database = "connected"
    except SQLAlchemyError as exc:
        logger.warning("Database health probe failed: %s", exc)
        await session.rollback()
        database = "disconnected"

    health = HealthResponse(
        database=database,
        generator="configured" if generator.is_configured else "missing_credential",
        timestamp=datetime.now(timezone.utc),
        version=settings.app_version,
    )

    if database == "connected":
        try:
            await ContentStoreService(session).record_health_check(health.model_dump(mode="json"))
        except ContentStoreError as exc:
            logger.warning("Health check not recorded: %s", exc)

    return health


@router.get("/latest", response_model=StoredHealthCheckResponse)
async def latest_health_check(
    session: AsyncSession = Depends(get_session),
) -> StoredHealthCheckResponse:
    record = await ContentStoreService(session).latest_health_check()
    if record is None:
        raise HTTPException(status_code=404, detail="No health checks recorded yet.")
    return StoredHealthCheckResponse(
        id=record.id,
        service_status=record.service_status,
        checked_at=record.checked_at,
    )
