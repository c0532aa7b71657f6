"""Request and response models for the HTTP API."""

from dataclasses import asdict
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from photo_describe.domain.photos import PhotoStatus, SessionScope
from photo_describe.domain.trivia import MadLibTrivia
from photo_describe.services.photos import PhotoView


class UploadUrlResponse(BaseModel):
    upload_url: str
    storage_id: str


class SavePhotoRequest(BaseModel):
    storage_id: str = Field(min_length=1)


class SavePhotoResponse(BaseModel):
    photo_id: UUID


class PhotoResponse(BaseModel):
    """A photo record as returned to its owner."""

    id: UUID
    session_id: str | None = None
    user_id: str | None = None
    storage_id: str
    status: PhotoStatus
    description: str | None = None
    error: str | None = None
    created_at: datetime
    url: str | None = None

    @classmethod
    def from_view(cls, view: PhotoView) -> "PhotoResponse":
        record = view.record
        session_id = None
        user_id = None
        if isinstance(record.scope, SessionScope):
            session_id = record.scope.session_id
        elif record.scope is not None:
            user_id = record.scope.user_id
        return cls(
            id=record.id,
            session_id=session_id,
            user_id=user_id,
            storage_id=record.storage_id,
            status=record.status,
            description=record.description,
            error=record.error,
            created_at=record.created_at,
            url=view.url,
        )


class PhotoListResponse(BaseModel):
    photos: list[PhotoResponse]


class SessionResponse(BaseModel):
    session_id: str


def serialize_trivia(trivia: MadLibTrivia) -> dict[str, dict[str, object] | None]:
    """Convert a trivia selection into a JSON-friendly mapping."""
    return {
        category: asdict(row) if row is not None else None
        for category, row in (
            ("music", trivia.music),
            ("films", trivia.films),
            ("tv_shows", trivia.tv_shows),
            ("fiction", trivia.fiction),
            ("non_fiction", trivia.non_fiction),
            ("podcasts", trivia.podcasts),
            ("architecture", trivia.architecture),
            ("visual_art", trivia.visual_art),
        )
    }
