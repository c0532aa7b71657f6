"""Supabase-backed photo repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from photo_describe.domain.photos import (
    PhotoRecord,
    PhotoStatus,
    Scope,
    SessionScope,
    UserScope,
)
from photo_describe.services.photos import PhotoRepository

_COLUMNS = "id, session_id, user_id, storage_id, status, description, error, created_at"


@dataclass
class SupabasePhotoRepository(PhotoRepository):
    """Supabase implementation for photo record persistence."""

    client: Client

    def insert(self, scope: Scope, storage_id: str) -> UUID:
        """Create a pending photo row and return its id."""
        response = (
            self.client.table("photos")
            .insert(
                {
                    **_scope_columns(scope),
                    "storage_id": storage_id,
                    "status": PhotoStatus.PENDING.value,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create photo record")
        return UUID(response.data[0]["id"])

    def get(self, photo_id: UUID) -> PhotoRecord | None:
        """Return a photo by id, if present."""
        response = (
            self.client.table("photos")
            .select(_COLUMNS)
            .eq("id", str(photo_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_photo(response.data[0])

    def list_by_scope(self, scope: Scope) -> list[PhotoRecord]:
        """Return photos owned by a scope, newest first."""
        column, value = _scope_filter(scope)
        response = (
            self.client.table("photos")
            .select(_COLUMNS)
            .eq(column, value)
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_photo(row) for row in response.data or []]

    def patch(
        self,
        photo_id: UUID,
        fields: dict[str, object],
        only_if_status: PhotoStatus | None = None,
    ) -> bool:
        """Apply a partial update, optionally conditional on the current status."""
        query = (
            self.client.table("photos")
            .update(dict(fields))
            .eq("id", str(photo_id))
        )
        if only_if_status is not None:
            query = query.eq("status", only_if_status.value)
        response = query.execute()
        return bool(response.data)


def _scope_columns(scope: Scope) -> dict[str, str | None]:
    if isinstance(scope, SessionScope):
        return {"session_id": scope.session_id, "user_id": None}
    return {"session_id": None, "user_id": scope.user_id}


def _scope_filter(scope: Scope) -> tuple[str, str]:
    if isinstance(scope, SessionScope):
        return "session_id", scope.session_id
    return "user_id", scope.user_id


def _parse_scope(row: dict[str, object]) -> Scope | None:
    session_id = row.get("session_id")
    if session_id:
        return SessionScope(session_id=str(session_id))
    user_id = row.get("user_id")
    if user_id:
        return UserScope(user_id=str(user_id))
    return None


def _parse_photo(row: dict[str, object]) -> PhotoRecord:
    """Parse a photos row into a domain model."""
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else datetime.now(tz=UTC)
    )
    return PhotoRecord(
        id=UUID(str(row["id"])),
        scope=_parse_scope(row),
        storage_id=str(row["storage_id"]),
        status=PhotoStatus(row.get("status", PhotoStatus.PENDING.value)),
        created_at=created_at,
        description=row.get("description"),
        error=row.get("error"),
    )
