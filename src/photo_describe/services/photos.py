"""Client-facing photo operations."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID

from photo_describe.domain.photos import (
    PhotoRecord,
    PhotoStatus,
    Scope,
    UploadTarget,
    scope_label,
)
from photo_describe.services.scheduler import JobScheduler
from photo_describe.services.storage import ObjectStorage


class PhotoRepository(Protocol):
    """Persistence interface for photo records."""

    def insert(self, scope: Scope, storage_id: str) -> UUID:
        """Create a pending photo record and return its id."""

    def get(self, photo_id: UUID) -> PhotoRecord | None:
        """Return a photo by id, if present."""

    def list_by_scope(self, scope: Scope) -> list[PhotoRecord]:
        """Return photos owned by a scope, newest first."""

    def patch(
        self,
        photo_id: UUID,
        fields: dict[str, object],
        only_if_status: PhotoStatus | None = None,
    ) -> bool:
        """Apply a partial update and return whether a row changed."""


@dataclass(frozen=True)
class PhotoView:
    """A photo record with a signed display URL attached."""

    record: PhotoRecord
    url: str | None


@dataclass
class PhotoService:
    """Upload, save and scoped read operations for photos."""

    repository: PhotoRepository
    storage: ObjectStorage
    scheduler: JobScheduler
    analysis_job: Callable[[UUID], Awaitable[object]]
    analysis_delay_ms: int = 2000
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def generate_upload_url(self) -> UploadTarget:
        """Return a short-lived upload URL for the client."""
        return self.storage.generate_upload_url()

    def save_photo(self, storage_id: str, scope: Scope) -> UUID:
        """Persist an uploaded photo and schedule its analysis."""
        photo_id = self.repository.insert(scope, storage_id)
        self.logger.info(
            "photo_upload_completed",
            extra={
                "photo_id": str(photo_id),
                "scope": scope_label(scope),
                "storage_id": storage_id,
            },
        )
        self.schedule_analysis(photo_id, self.analysis_delay_ms)
        return photo_id

    def schedule_analysis(self, photo_id: UUID, delay_ms: int) -> None:
        """Schedule the analysis worker for a photo."""
        self.scheduler.schedule(delay_ms, self.analysis_job, photo_id)
        self.logger.info(
            "photo_analysis_scheduled",
            extra={"photo_id": str(photo_id), "delay_ms": delay_ms},
        )

    def get_photo(self, photo_id: UUID, scope: Scope) -> PhotoView | None:
        """Return a photo visible to the scope, if any."""
        record = self.repository.get(photo_id)
        if record is None or not record.is_visible_to(scope):
            return None
        return PhotoView(record=record, url=self.storage.get_url(record.storage_id))

    def list_photos(self, scope: Scope) -> list[PhotoView]:
        """Return a scope's photos, newest first."""
        return [
            PhotoView(record=record, url=self.storage.get_url(record.storage_id))
            for record in self.repository.list_by_scope(scope)
        ]
