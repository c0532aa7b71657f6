"""Command-line client: upload a photo and print its description.

Usage:
  photo-describe path/to/photo.jpg --base-url https://photo-describe.example
  photo-describe path/to/photo.jpg --session-id session_abc123
"""

import argparse
import asyncio
import mimetypes
import os
import sys
from pathlib import Path

import httpx

from photo_describe.adapters.http_photo_client import HttpxPhotoClient
from photo_describe.domain.errors import InvalidScopeError
from photo_describe.domain.photos import PhotoStatus, parse_scope
from photo_describe.services.session_ids import generate_session_id
from photo_describe.services.subscriber import FALLBACK_ERROR

DEFAULT_BASE_URL = "http://localhost:8000"


async def describe_image(
    client: HttpxPhotoClient,
    image_bytes: bytes,
    content_type: str,
    poll_interval_seconds: float = 1.0,
    max_polls: int | None = None,
) -> dict[str, object] | None:
    """Upload an image, save it and wait until its analysis settles."""
    try:
        photo_id = await client.upload_and_save(image_bytes, content_type)
        return await client.wait_for_result(
            photo_id,
            poll_interval_seconds=poll_interval_seconds,
            max_polls=max_polls,
        )
    finally:
        await client.close()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Upload a photo and print its generated description."
    )
    parser.add_argument("image", type=Path, help="Image file to upload.")
    parser.add_argument(
        "--base-url",
        default=os.getenv("PHOTO_DESCRIBE_URL", DEFAULT_BASE_URL),
        help="API base URL (default: $PHOTO_DESCRIBE_URL or %(default)s).",
    )
    parser.add_argument("--session-id", help="Reuse an anonymous session id.")
    parser.add_argument("--user-id", help="Save the photo for a signed-in user.")
    parser.add_argument("--poll-interval", type=float, default=1.0)
    parser.add_argument("--max-polls", type=int, default=120)
    return parser


def main(
    argv: list[str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    session_id = args.session_id
    if not session_id and not args.user_id:
        session_id = generate_session_id()
        print(f"session: {session_id}", file=sys.stderr)
    try:
        scope = parse_scope(session_id, args.user_id)
    except InvalidScopeError as exc:
        parser.error(str(exc))

    try:
        image_bytes = args.image.read_bytes()
    except OSError as exc:
        parser.error(f"cannot read {args.image}: {exc}")
    content_type = mimetypes.guess_type(args.image.name)[0] or "image/jpeg"

    client = HttpxPhotoClient.create(args.base_url, scope, transport=transport)
    try:
        payload = asyncio.run(
            describe_image(
                client,
                image_bytes,
                content_type,
                poll_interval_seconds=args.poll_interval,
                max_polls=args.max_polls,
            )
        )
    except (httpx.HTTPError, RuntimeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if payload is None:
        print("Error: photo not found", file=sys.stderr)
        return 1
    status = PhotoStatus(payload["status"])
    if status is PhotoStatus.DONE:
        print(payload["description"])
        return 0
    if status is PhotoStatus.ERROR:
        print(f"Error: {payload.get('error') or FALLBACK_ERROR}", file=sys.stderr)
        return 1
    print(f"Photo {payload['id']} is still being analyzed.", file=sys.stderr)
    return 2


if __name__ == "__main__":
    sys.exit(main())
