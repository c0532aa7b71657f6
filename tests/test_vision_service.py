"""Tests for vision service."""

import asyncio

from photo_describe.services.vision import EMPTY_DESCRIPTION, VisionService, _to_data_url
from tests.conftest import FakeVisionClient


def _service(client: FakeVisionClient) -> VisionService:
    return VisionService(
        client=client,
        model="gpt-4.1-nano-2025-04-14",
        max_tokens=128,
        prompt="Describe the image.",
    )


def test_vision_service_trims_completion() -> None:
    client = FakeVisionClient(responses=["\n  A bright kitchen.  \n"])

    result = asyncio.run(_service(client).describe(b"image-bytes"))

    assert result == "A bright kitchen."
    assert client.calls[0]["prompt"] == "Describe the image."
    assert client.calls[0]["model"] == "gpt-4.1-nano-2025-04-14"


def test_vision_service_substitutes_placeholder_for_missing_text() -> None:
    client = FakeVisionClient(responses=[None])

    result = asyncio.run(_service(client).describe(b"image-bytes"))

    assert result == EMPTY_DESCRIPTION


def test_to_data_url_uses_png_header() -> None:
    data = b"\x89PNG\r\n\x1a\n" + b"rest"
    url = _to_data_url(data)

    assert url.startswith("data:image/png;base64,")


def test_to_data_url_detects_gif() -> None:
    assert _to_data_url(b"GIF89a....").startswith("data:image/gif;base64,")


def test_to_data_url_defaults_to_jpeg() -> None:
    data = b"unknown"
    url = _to_data_url(data)

    assert url.startswith("data:image/jpeg;base64,")
