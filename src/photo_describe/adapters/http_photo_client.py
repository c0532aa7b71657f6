"""HTTP client for the photo describe API."""

import asyncio
from dataclasses import dataclass
from uuid import UUID

import httpx

from photo_describe.domain.photos import PhotoStatus, Scope, SessionScope


@dataclass
class HttpxPhotoClient:
    """Client that performs the upload, save and lookup calls over HTTP."""

    base_url: str
    scope: Scope
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls,
        base_url: str,
        scope: Scope,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "HttpxPhotoClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            scope=scope,
            http_client=httpx.AsyncClient(transport=transport),
        )

    async def upload_and_save(
        self, image_bytes: bytes, content_type: str = "image/jpeg"
    ) -> UUID:
        """Upload bytes directly to storage, then save the photo record."""
        response = await self.http_client.post(
            f"{self.base_url}/photos/upload-url", timeout=10
        )
        response.raise_for_status()
        target = response.json()

        upload = await self.http_client.put(
            target["upload_url"],
            content=image_bytes,
            headers={"Content-Type": content_type},
            timeout=30,
        )
        if upload.is_error:
            raise RuntimeError(f"Upload failed: {upload.text}")

        saved = await self.http_client.post(
            f"{self.base_url}/photos",
            json={"storage_id": target["storage_id"]},
            headers=self._scope_headers(),
            timeout=10,
        )
        saved.raise_for_status()
        return UUID(saved.json()["photo_id"])

    async def get_photo(self, photo_id: UUID) -> dict[str, object] | None:
        """Return the photo payload, or None when it is absent or hidden."""
        response = await self.http_client.get(
            f"{self.base_url}/photos/{photo_id}",
            headers=self._scope_headers(),
            timeout=10,
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        response.raise_for_status()
        return response.json()

    async def wait_for_result(
        self,
        photo_id: UUID,
        poll_interval_seconds: float = 1.0,
        max_polls: int | None = None,
    ) -> dict[str, object] | None:
        """Poll a photo until it reaches a terminal status.

        Returns the last payload seen, which is still pending when
        ``max_polls`` runs out, or None when the photo is not visible.
        """
        polls = 0
        while True:
            payload = await self.get_photo(photo_id)
            if payload is None or PhotoStatus(payload["status"]).is_terminal:
                return payload
            polls += 1
            if max_polls is not None and polls >= max_polls:
                return payload
            await asyncio.sleep(poll_interval_seconds)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    def _scope_headers(self) -> dict[str, str]:
        if isinstance(self.scope, SessionScope):
            return {"X-Session-Id": self.scope.session_id}
        return {"X-User-Id": self.scope.user_id}
