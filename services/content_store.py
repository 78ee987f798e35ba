from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import AIGeneratedContent, AudioFile, HealthCheck, User
from services.content_generator import ContentKind

logger = logging.getLogger(__name__)


class ContentStoreError(RuntimeError):
    """Raised when a write to the relational store is rejected."""


@dataclass(frozen=True)
class TrackMetadata:
    filename: str
    bpm: int | None = None
    musical_key: str | None = None
    genre: str | None = None
    mood: str | None = None


class ContentStoreService:
    """Persist users, audio-file metadata, generated content and health checks."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _commit(self, failure_message: str) -> None:
        try:
            await self._session.commit()
        except IntegrityError as exc:
            await self._session.rollback()
            logger.warning("%s: %s", failure_message, exc.orig)
            raise ContentStoreError(failure_message) from exc

    async def create_user(self, email: str, username: str) -> User:
        user = User(email=email, username=username)
        self._session.add(user)
        await self._commit(f"Unable to create user {email}")
        await self._session.refresh(user)
        return user

    async def get_user_by_email(self, email: str) -> User | None:
        result = await self._session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_user(self, user_id: int) -> User | None:
        return await self._session.get(User, user_id)

    async def add_audio_file(
        self,
        user_id: int,
        filename: str,
        bpm: int | None = None,
        musical_key: str | None = None,
        genre: str | None = None,
        mood: str | None = None,
    ) -> AudioFile:
        audio_file = AudioFile(
            user_id=user_id,
            filename=filename,
            bpm=bpm,
            musical_key=musical_key,
            genre=genre,
            mood=mood,
        )
        self._session.add(audio_file)
        await self._commit(f"Unable to store audio file {filename}")
        await self._session.refresh(audio_file)
        return audio_file

    async def list_audio_files_for_user(self, email: str) -> list[tuple[AudioFile, str]]:
        result = await self._session.execute(
            select(AudioFile, User.username)
            .join(User, AudioFile.user_id == User.id)
            .where(User.email == email)
            .order_by(AudioFile.id)
        )
        return [(audio_file, username) for audio_file, username in result.all()]

    async def count_audio_files(self, user_id: int) -> int:
        result = await self._session.execute(
            select(func.count()).select_from(AudioFile).where(AudioFile.user_id == user_id)
        )
        return int(result.scalar_one())

    async def create_user_with_audio_files(
        self,
        email: str,
        username: str,
        tracks: Iterable[TrackMetadata],
    ) -> User:
        """Create a user and all of their tracks in a single transaction."""
        try:
            user = User(email=email, username=username)
            self._session.add(user)
            await self._session.flush()
            self._session.add_all(
                [
                    AudioFile(
                        user_id=user.id,
                        filename=track.filename,
                        bpm=track.bpm,
                        musical_key=track.musical_key,
                        genre=track.genre,
                        mood=track.mood,
                    )
                    for track in tracks
                ]
            )
            await self._session.commit()
        except IntegrityError as exc:
            await self._session.rollback()
            logger.warning("Rolled back bulk import for %s: %s", email, exc.orig)
            raise ContentStoreError(f"Unable to create user {email} with audio files") from exc

        await self._session.refresh(user)
        return user

    async def save_generated_content(
        self,
        content_kind: ContentKind,
        input_data: dict[str, Any],
        output_data: dict[str, Any],
    ) -> AIGeneratedContent:
        record = AIGeneratedContent(
            content_type=content_kind.value,
            input_data=input_data,
            output_data=output_data,
        )
        self._session.add(record)
        await self._commit(f"Unable to store {content_kind.value} content")
        await self._session.refresh(record)
        logger.info("Stored %s content as record %s", content_kind.value, record.id)
        return record

    async def list_generated_content(
        self, content_kind: ContentKind | None = None
    ) -> list[AIGeneratedContent]:
        query = select(AIGeneratedContent).order_by(AIGeneratedContent.id)
        if content_kind is not None:
            query = query.where(AIGeneratedContent.content_type == content_kind.value)
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def record_health_check(self, service_status: dict[str, Any]) -> HealthCheck:
        record = HealthCheck(service_status=service_status)
        self._session.add(record)
        await self._commit("Unable to record health check")
        await self._session.refresh(record)
        return record

    async def latest_health_check(self) -> HealthCheck | None:
        result = await self._session.execute(
            select(HealthCheck).order_by(HealthCheck.checked_at.desc(), HealthCheck.id.desc()).limit(1)
        )
        return result.scalar_one_or_none()
