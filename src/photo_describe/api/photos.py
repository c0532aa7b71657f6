"""Photo upload, lookup and live status endpoints."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from fastapi.responses import StreamingResponse

from photo_describe.api.models import (
    PhotoListResponse,
    PhotoResponse,
    SavePhotoRequest,
    SavePhotoResponse,
    UploadUrlResponse,
)
from photo_describe.domain.photos import Scope, parse_scope

if TYPE_CHECKING:
    from photo_describe.containers import AppContainer

router = APIRouter(prefix="/photos", tags=["photos"])


async def resolve_scope(
    x_session_id: str | None = Header(default=None),
    x_user_id: str | None = Header(default=None),
) -> Scope:
    """Resolve the caller's scope from exactly one identity header."""
    return parse_scope(x_session_id, x_user_id)


@router.post("/upload-url")
async def generate_upload_url(request: Request) -> UploadUrlResponse:
    """Return a short-lived URL for a direct upload to storage."""
    container: AppContainer = request.app.state.container
    target = container.photo_service.generate_upload_url()
    return UploadUrlResponse(
        upload_url=target.upload_url, storage_id=target.storage_id
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def save_photo(
    body: SavePhotoRequest,
    request: Request,
    scope: Scope = Depends(resolve_scope),
) -> SavePhotoResponse:
    """Record an uploaded photo and schedule its analysis."""
    container: AppContainer = request.app.state.container
    photo_id = container.photo_service.save_photo(body.storage_id, scope)
    return SavePhotoResponse(photo_id=photo_id)


@router.get("")
async def list_photos(
    request: Request, scope: Scope = Depends(resolve_scope)
) -> PhotoListResponse:
    """Return the caller's photos, newest first."""
    container: AppContainer = request.app.state.container
    views = container.photo_service.list_photos(scope)
    return PhotoListResponse(photos=[PhotoResponse.from_view(view) for view in views])


@router.get("/{photo_id}")
async def get_photo(
    photo_id: UUID, request: Request, scope: Scope = Depends(resolve_scope)
) -> PhotoResponse:
    """Return a single photo visible to the caller."""
    container: AppContainer = request.app.state.container
    view = container.photo_service.get_photo(photo_id, scope)
    if view is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return PhotoResponse.from_view(view)


@router.get("/{photo_id}/events")
async def photo_events(
    photo_id: UUID, request: Request, scope: Scope = Depends(resolve_scope)
) -> StreamingResponse:
    """Stream a server-sent event for every status change of a photo."""
    container: AppContainer = request.app.state.container
    if container.photo_service.get_photo(photo_id, scope) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)

    async def event_stream() -> AsyncIterator[str]:
        async for view in container.subscriber.watch(photo_id, scope):
            payload = PhotoResponse.from_view(view).model_dump_json()
            yield f"event: photo\ndata: {payload}\n\n"

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
