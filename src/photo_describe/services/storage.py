"""Object storage abstractions."""

from typing import Protocol

from photo_describe.domain.photos import UploadTarget


class ObjectStorage(Protocol):
    """Interface for binary object storage."""

    def generate_upload_url(self) -> UploadTarget:
        """Return a short-lived URL for one direct client upload."""

    def download(self, storage_id: str) -> bytes | None:
        """Return object bytes, or None when the object does not exist."""

    def get_url(self, storage_id: str) -> str | None:
        """Return a signed read URL for an object, if it exists."""
