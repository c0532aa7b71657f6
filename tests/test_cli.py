"""Tests for the command-line client."""

import asyncio
from uuid import uuid4

import httpx
import pytest

from photo_describe.adapters.http_photo_client import HttpxPhotoClient
from photo_describe.cli import describe_image, main
from photo_describe.domain.photos import SessionScope
from tests.conftest import JPEG_BYTES


def _api_handler(photo_id, statuses: list[dict[str, object]], seen: list[str]):
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(f"{request.method} {request.url.host}{request.url.path}")
        if request.url.path == "/photos/upload-url":
            return httpx.Response(
                200,
                json={
                    "upload_url": "https://storage.test/upload/uploads/abc",
                    "storage_id": "uploads/abc",
                },
            )
        if request.url.host == "storage.test":
            return httpx.Response(200, json={"Key": "photos/uploads/abc"})
        if request.method == "POST":
            return httpx.Response(201, json={"photo_id": str(photo_id)})
        payload = statuses.pop(0) if len(statuses) > 1 else statuses[0]
        return httpx.Response(200, json={"id": str(photo_id), **payload})

    return handler


def test_describe_image_polls_until_done() -> None:
    photo_id = uuid4()
    seen: list[str] = []
    handler = _api_handler(
        photo_id,
        [{"status": "pending"}, {"status": "pending"}, {"status": "done", "description": "A dog."}],
        seen,
    )
    client = HttpxPhotoClient.create(
        "https://api.test/",
        SessionScope("session_cli"),
        transport=httpx.MockTransport(handler),
    )

    payload = asyncio.run(
        describe_image(client, JPEG_BYTES, "image/jpeg", poll_interval_seconds=0)
    )

    assert payload["status"] == "done"
    assert payload["description"] == "A dog."
    assert seen.count(f"GET api.test/photos/{photo_id}") == 3
    assert client.http_client.is_closed


def test_wait_for_result_stops_after_max_polls() -> None:
    photo_id = uuid4()
    seen: list[str] = []
    client = HttpxPhotoClient.create(
        "https://api.test",
        SessionScope("session_cli"),
        transport=httpx.MockTransport(_api_handler(photo_id, [{"status": "pending"}], seen)),
    )

    payload = asyncio.run(
        client.wait_for_result(photo_id, poll_interval_seconds=0, max_polls=2)
    )

    assert payload["status"] == "pending"
    assert len(seen) == 2


def test_main_prints_description(tmp_path, capsys) -> None:
    image = tmp_path / "photo.png"
    image.write_bytes(b"\x89PNG\r\n\x1a\nbody")
    handler = _api_handler(
        uuid4(), [{"status": "done", "description": "A lighthouse at dusk."}], []
    )

    code = main(
        [str(image), "--base-url", "https://api.test", "--session-id", "session_cli"],
        transport=httpx.MockTransport(handler),
    )

    assert code == 0
    assert capsys.readouterr().out.strip() == "A lighthouse at dusk."


def test_main_reports_stored_error(tmp_path, capsys) -> None:
    image = tmp_path / "photo.jpg"
    image.write_bytes(JPEG_BYTES)
    handler = _api_handler(
        uuid4(), [{"status": "error", "error": "Failed to download image"}], []
    )

    code = main(
        [str(image), "--base-url", "https://api.test", "--user-id", "user-1"],
        transport=httpx.MockTransport(handler),
    )

    assert code == 1
    assert "Error: Failed to download image" in capsys.readouterr().err


def test_main_generates_session_when_no_scope_given(tmp_path, capsys) -> None:
    image = tmp_path / "photo.jpg"
    image.write_bytes(JPEG_BYTES)
    session_headers: list[str] = []
    inner = _api_handler(uuid4(), [{"status": "done", "description": "Hi."}], [])

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "api.test" and request.method == "GET":
            session_headers.append(request.headers["X-Session-Id"])
        return inner(request)

    code = main(
        [str(image), "--base-url", "https://api.test"],
        transport=httpx.MockTransport(handler),
    )

    assert code == 0
    generated = capsys.readouterr().err.strip().removeprefix("session: ")
    assert generated.startswith("session_")
    assert session_headers == [generated]


def test_main_rejects_both_scopes(tmp_path) -> None:
    image = tmp_path / "photo.jpg"
    image.write_bytes(JPEG_BYTES)

    with pytest.raises(SystemExit) as excinfo:
        main([str(image), "--session-id", "session_a", "--user-id", "user-1"])

    assert excinfo.value.code == 2


def test_main_rejects_missing_file(tmp_path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path / "missing.jpg"), "--session-id", "session_a"])

    assert excinfo.value.code == 2
