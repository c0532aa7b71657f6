"""Supabase Storage adapter for uploaded images."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from uuid import uuid4

from supabase import Client

from photo_describe.domain.photos import UploadTarget
from photo_describe.services.storage import ObjectStorage

logger = logging.getLogger(__name__)


@dataclass
class SupabaseObjectStorage(ObjectStorage):
    """Object storage backed by a Supabase Storage bucket."""

    client: Client
    bucket: str
    signed_url_ttl_seconds: int = 3600
    path_prefix: str = "uploads"
    new_object_name: Callable[[], str] = field(
        default=lambda: uuid4().hex, repr=False
    )

    def generate_upload_url(self) -> UploadTarget:
        """Create a signed upload URL for a fresh object path."""
        storage_id = f"{self.path_prefix}/{self.new_object_name()}"
        response = self.client.storage.from_(self.bucket).create_signed_upload_url(
            storage_id
        )
        upload_url = response.get("signed_url") or response.get("signedUrl")
        if not upload_url:
            raise RuntimeError("Failed to create signed upload URL")
        return UploadTarget(upload_url=upload_url, storage_id=storage_id)

    def download(self, storage_id: str) -> bytes | None:
        """Download object bytes; storage errors propagate to the caller."""
        data = self.client.storage.from_(self.bucket).download(storage_id)
        return data or None

    def get_url(self, storage_id: str) -> str | None:
        """Return a signed read URL, or None if it cannot be created."""
        try:
            response = self.client.storage.from_(self.bucket).create_signed_url(
                storage_id, self.signed_url_ttl_seconds
            )
        except Exception:
            logger.exception(
                "Failed to sign storage URL", extra={"storage_id": storage_id}
            )
            return None
        return response.get("signedURL") or response.get("signedUrl")
