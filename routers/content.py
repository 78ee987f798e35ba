from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_session
from app.dependencies import get_content_generator
from schemas.generated_content import (
    GeneratedContentResponse,
    GrowthContentRequest,
    StoredContentResponse,
    TrackPromoRequest,
)
from services.content_generator import ContentGeneratorService, ContentKind
from services.content_store import ContentStoreError, ContentStoreService

router = APIRouter(prefix="/generate", tags=["content"])
stored_router = APIRouter(tags=["content"])


async def _respond(
    session: AsyncSession,
    content_kind: ContentKind,
    input_data: dict[str, Any],
    result: Any,
    persist: bool,
) -> GeneratedContentResponse:
    if result is None:
        raise HTTPException(status_code=502, detail="Content generation failed.")

    output_data = result.model_dump(by_alias=True)
    record_id = None
    if persist:
        store = ContentStoreService(session)
        try:
            record = await store.save_generated_content(content_kind, input_data, output_data)
        except ContentStoreError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        record_id = record.id

    return GeneratedContentResponse(id=record_id, content_type=content_kind, content=output_data)


def _track_input(payload: TrackPromoRequest) -> dict[str, Any]:
    return {"trackTitle": payload.track_title, "artist": payload.artist, "vibe": payload.vibe}


@router.post("/dj-promo", response_model=GeneratedContentResponse)
async def generate_dj_promo(
    payload: TrackPromoRequest,
    generator: ContentGeneratorService = Depends(get_content_generator),
    session: AsyncSession = Depends(get_session),
) -> GeneratedContentResponse:
    result = await generator.generate_dj_promo(payload.track_title, payload.artist, payload.vibe)
    return await _respond(session, ContentKind.dj_promo, _track_input(payload), result, payload.persist)


@router.post("/social-uplink", response_model=GeneratedContentResponse)
async def generate_social_uplink(
    payload: TrackPromoRequest,
    generator: ContentGeneratorService = Depends(get_content_generator),
    session: AsyncSession = Depends(get_session),
) -> GeneratedContentResponse:
    result = await generator.generate_social_uplink(payload.track_title, payload.artist, payload.vibe)
    return await _respond(
        session, ContentKind.social_uplink, _track_input(payload), result, payload.persist
    )


@router.post("/growth-content", response_model=GeneratedContentResponse)
async def generate_growth_content(
    payload: GrowthContentRequest,
    generator: ContentGeneratorService = Depends(get_content_generator),
    session: AsyncSession = Depends(get_session),
) -> GeneratedContentResponse:
    result = await generator.generate_growth_content(payload.topic, payload.content_format)
    input_data = {"topic": payload.topic, "contentType": payload.content_format}
    return await _respond(session, ContentKind.growth_content, input_data, result, payload.persist)


@stored_router.get("/generated-content", response_model=list[StoredContentResponse])
async def list_generated_content(
    content_type: ContentKind | None = Query(default=None),
    session: AsyncSession = Depends(get_session),
) -> list[StoredContentResponse]:
    store = ContentStoreService(session)
    records = await store.list_generated_content(content_type)
    return [
        StoredContentResponse(
            id=record.id,
            content_type=record.content_type,
            input_data=record.input_data,
            output_data=record.output_data,
            created_at=record.created_at,
        )
        for record in records
    ]
