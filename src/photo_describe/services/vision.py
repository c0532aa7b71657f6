"""Vision description service using LLMs."""

import base64
from dataclasses import dataclass
from typing import Protocol

EMPTY_DESCRIPTION = "No description generated."


class VisionClient(Protocol):
    """Interface for LLM image description."""

    async def describe(
        self,
        *,
        model: str,
        max_tokens: int,
        image_data_url: str,
        prompt: str,
    ) -> str | None:
        """Return the raw completion text for an image and prompt."""


@dataclass
class VisionService:
    """Service that prepares the vision request and normalizes the result."""

    client: VisionClient
    model: str
    max_tokens: int
    prompt: str

    async def describe(self, image_bytes: bytes) -> str:
        """Describe an image via the configured client."""
        data_url = _to_data_url(image_bytes)
        raw = await self.client.describe(
            model=self.model,
            max_tokens=self.max_tokens,
            image_data_url=data_url,
            prompt=self.prompt,
        )
        text = (raw or "").strip()
        return text or EMPTY_DESCRIPTION


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"
