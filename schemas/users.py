from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class UserCreateRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    username: str = Field(min_length=1, max_length=100)


class UserResponse(BaseModel):
    id: int
    email: str
    username: str
    created_at: datetime | None = None


class AudioFileCreateRequest(BaseModel):
    filename: str = Field(min_length=1, max_length=255)
    bpm: int | None = Field(default=None, ge=1, le=999)
    musical_key: str | None = Field(default=None, max_length=10)
    genre: str | None = Field(default=None, max_length=50)
    mood: str | None = Field(default=None, max_length=100)


class AudioFileResponse(BaseModel):
    id: int
    user_id: int | None
    filename: str
    bpm: int | None = None
    musical_key: str | None = None
    genre: str | None = None
    mood: str | None = None
    username: str | None = None


class UserWithAudioFilesRequest(UserCreateRequest):
    audio_files: list[AudioFileCreateRequest] = Field(min_length=1, max_length=100)


class UserWithAudioFilesResponse(UserResponse):
    audio_file_count: int
