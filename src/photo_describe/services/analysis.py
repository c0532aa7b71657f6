"""Background analysis worker for uploaded photos.

A run walks four straight-line stages: fetch the record, download the image,
call the vision model, write the result. Every failure is terminal for the job
and is stored on the record as a user-facing message. A store failure while
reading or writing the record abandons the job. Nothing is retried and nothing
is re-raised to the scheduler.
"""

import logging
from dataclasses import dataclass, field
from uuid import UUID

from photo_describe.domain.errors import PhotoNotFoundError
from photo_describe.domain.photos import AnalysisOutcome, PhotoRecord, PhotoStatus
from photo_describe.services.photos import PhotoRepository
from photo_describe.services.storage import ObjectStorage
from photo_describe.services.vision import VisionService

PHOTO_NOT_FOUND_MESSAGE = "Photo not found"
DOWNLOAD_FAILED_MESSAGE = "Failed to download image"
TIMEOUT_MESSAGE = "Request timed out. Please try again."
RATE_LIMITED_MESSAGE = "Too many requests. Please try again later."
QUOTA_EXCEEDED_MESSAGE = "API quota exceeded. Please try again later."
GENERIC_FAILURE_MESSAGE = "Failed to generate description with OpenAI."

_RATE_LIMIT_STATUS = 429
_QUOTA_CODE = "insufficient_quota"


@dataclass
class AnalysisService:
    """Runs the describe-photo job and records its terminal state."""

    repository: PhotoRepository
    storage: ObjectStorage
    vision_service: VisionService
    guard_terminal_writes: bool = True
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    async def describe_photo(self, photo_id: UUID) -> AnalysisOutcome:
        """Analyze a photo and patch the record to done or error."""
        self.logger.info("photo_analysis_started", extra={"photo_id": str(photo_id)})

        try:
            record = self.repository.get(photo_id)
        except Exception as exc:
            self._log_abandoned(photo_id, "fetch", exc)
            return AnalysisOutcome(
                photo_id=photo_id,
                status=PhotoStatus.ERROR,
                error=str(exc) or GENERIC_FAILURE_MESSAGE,
                written=False,
            )
        if record is None:
            self.logger.warning(
                "photo_analysis_error",
                extra={
                    "photo_id": str(photo_id),
                    "error": PHOTO_NOT_FOUND_MESSAGE,
                    "stage": "fetch",
                },
            )
            return self._finish_with_error(photo_id, PHOTO_NOT_FOUND_MESSAGE)

        if self.guard_terminal_writes and record.status.is_terminal:
            self.logger.info(
                "photo_analysis_skipped",
                extra={"photo_id": str(photo_id), "status": record.status.value},
            )
            return AnalysisOutcome(
                photo_id=photo_id,
                status=record.status,
                description=record.description,
                error=record.error,
                written=False,
            )

        image_bytes = self._download(record)
        if image_bytes is None:
            return self._finish_with_error(photo_id, DOWNLOAD_FAILED_MESSAGE)

        self.logger.info(
            "openai_request_started",
            extra={
                "photo_id": str(photo_id),
                "model": self.vision_service.model,
                "max_tokens": self.vision_service.max_tokens,
            },
        )
        try:
            description = await self.vision_service.describe(image_bytes)
        except Exception as exc:
            message = classify_vision_error(exc)
            self.logger.warning(
                "openai_request_error",
                extra={
                    "photo_id": str(photo_id),
                    "error": str(exc) or "Unknown error",
                    "error_type": type(exc).__name__,
                    "error_code": getattr(exc, "code", None) or "none",
                    "status": getattr(exc, "status_code", None) or "unknown",
                },
            )
            return self._finish_with_error(photo_id, message)

        self.logger.info(
            "openai_request_completed",
            extra={"photo_id": str(photo_id), "description_length": len(description)},
        )
        return self._finish_with_description(photo_id, description)

    def set_description(self, photo_id: UUID, description: str) -> bool:
        """Mark a photo done with its description."""
        written = self._write_terminal(
            photo_id,
            {
                "status": PhotoStatus.DONE.value,
                "description": description,
                "error": None,
            },
        )
        self.logger.info(
            "photo_analysis_completed",
            extra={
                "photo_id": str(photo_id),
                "description_length": len(description),
                "written": written,
            },
        )
        return written

    def set_error(self, photo_id: UUID, error: str) -> bool:
        """Mark a photo failed with a user-facing message."""
        written = self._write_terminal(
            photo_id,
            {"status": PhotoStatus.ERROR.value, "error": error, "description": None},
        )
        self.logger.info(
            "photo_analysis_failed",
            extra={"photo_id": str(photo_id), "error": error, "written": written},
        )
        return written

    def _download(self, record: PhotoRecord) -> bytes | None:
        try:
            data = self.storage.download(record.storage_id)
            if not data:
                raise LookupError("Image not found in storage")
        except Exception as exc:
            self.logger.warning(
                "photo_analysis_error",
                extra={
                    "photo_id": str(record.id),
                    "error": DOWNLOAD_FAILED_MESSAGE,
                    "stage": "download",
                    "error_details": str(exc),
                },
            )
            return None
        self.logger.info(
            "photo_download_completed",
            extra={
                "photo_id": str(record.id),
                "storage_id": record.storage_id,
                "size": len(data),
            },
        )
        return data

    def _write_terminal(self, photo_id: UUID, fields: dict[str, object]) -> bool:
        """Patch a terminal state; returns False when a guarded write is stale."""
        only_if = PhotoStatus.PENDING if self.guard_terminal_writes else None
        if self.repository.patch(photo_id, fields, only_if_status=only_if):
            return True
        if only_if is None or self.repository.get(photo_id) is None:
            raise PhotoNotFoundError(photo_id)
        return False

    def _finish_with_description(
        self, photo_id: UUID, description: str
    ) -> AnalysisOutcome:
        try:
            written = self.set_description(photo_id, description)
        except Exception as exc:
            self._log_abandoned(photo_id, "write", exc)
            written = False
        return AnalysisOutcome(
            photo_id=photo_id,
            status=PhotoStatus.DONE,
            description=description,
            written=written,
        )

    def _finish_with_error(self, photo_id: UUID, message: str) -> AnalysisOutcome:
        try:
            written = self.set_error(photo_id, message)
        except Exception as exc:
            self._log_abandoned(photo_id, "write", exc)
            written = False
        return AnalysisOutcome(
            photo_id=photo_id,
            status=PhotoStatus.ERROR,
            error=message,
            written=written,
        )

    def _log_abandoned(self, photo_id: UUID, stage: str, exc: Exception) -> None:
        self.logger.error(
            "photo_analysis_abandoned",
            extra={
                "photo_id": str(photo_id),
                "stage": stage,
                "error_type": type(exc).__name__,
                "error_details": str(exc),
            },
        )


def classify_vision_error(exc: Exception) -> str:
    """Map a model failure onto a user-facing message."""
    if isinstance(exc, TimeoutError) or getattr(exc, "timed_out", False):
        return TIMEOUT_MESSAGE
    if getattr(exc, "status_code", None) == _RATE_LIMIT_STATUS:
        return RATE_LIMITED_MESSAGE
    if getattr(exc, "code", None) == _QUOTA_CODE:
        return QUOTA_EXCEEDED_MESSAGE
    message = str(exc).strip()
    return message or GENERIC_FAILURE_MESSAGE
