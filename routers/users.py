from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_session
from schemas.users import (
    AudioFileCreateRequest,
    AudioFileResponse,
    UserCreateRequest,
    UserResponse,
    UserWithAudioFilesRequest,
    UserWithAudioFilesResponse,
)
from services.content_store import ContentStoreError, ContentStoreService, TrackMetadata

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    payload: UserCreateRequest,
    session: AsyncSession = Depends(get_session),
) -> UserResponse:
    store = ContentStoreService(session)
    try:
        user = await store.create_user(payload.email, payload.username)
    except ContentStoreError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return UserResponse(id=user.id, email=user.email, username=user.username, created_at=user.created_at)


@router.get("", response_model=UserResponse)
async def get_user(
    email: str = Query(min_length=3),
    session: AsyncSession = Depends(get_session),
) -> UserResponse:
    user = await ContentStoreService(session).get_user_by_email(email)
    if user is None:
        raise HTTPException(status_code=404, detail=f"User {email} not found.")
    return UserResponse(id=user.id, email=user.email, username=user.username, created_at=user.created_at)


@router.get("/audio-files", response_model=list[AudioFileResponse])
async def list_audio_files(
    email: str = Query(min_length=3),
    session: AsyncSession = Depends(get_session),
) -> list[AudioFileResponse]:
    rows = await ContentStoreService(session).list_audio_files_for_user(email)
    return [
        AudioFileResponse(
            id=audio_file.id,
            user_id=audio_file.user_id,
            filename=audio_file.filename,
            bpm=audio_file.bpm,
            musical_key=audio_file.musical_key,
            genre=audio_file.genre,
            mood=audio_file.mood,
            username=username,
        )
        for audio_file, username in rows
    ]


@router.post("/with-audio-files", response_model=UserWithAudioFilesResponse, status_code=201)
async def create_user_with_audio_files(
    payload: UserWithAudioFilesRequest,
    session: AsyncSession = Depends(get_session),
) -> UserWithAudioFilesResponse:
    store = ContentStoreService(session)
    tracks = [
        TrackMetadata(
            filename=item.filename,
            bpm=item.bpm,
            musical_key=item.musical_key,
            genre=item.genre,
            mood=item.mood,
        )
        for item in payload.audio_files
    ]
    try:
        user = await store.create_user_with_audio_files(payload.email, payload.username, tracks)
    except ContentStoreError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    return UserWithAudioFilesResponse(
        id=user.id,
        email=user.email,
        username=user.username,
        created_at=user.created_at,
        audio_file_count=await store.count_audio_files(user.id),
    )


@router.post("/{user_id}/audio-files", response_model=AudioFileResponse, status_code=201)
async def add_audio_file(
    user_id: int,
    payload: AudioFileCreateRequest,
    session: AsyncSession = Depends(get_session),
) -> AudioFileResponse:
    store = ContentStoreService(session)
    user = await store.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found.")

    try:
        audio_file = await store.add_audio_file(
            user_id=user.id,
            filename=payload.filename,
            bpm=payload.bpm,
            musical_key=payload.musical_key,
            genre=payload.genre,
            mood=payload.mood,
        )
    except ContentStoreError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    return AudioFileResponse(
        id=audio_file.id,
        user_id=audio_file.user_id,
        filename=audio_file.filename,
        bpm=audio_file.bpm,
        musical_key=audio_file.musical_key,
        genre=audio_file.genre,
        mood=audio_file.mood,
        username=user.username,
    )
