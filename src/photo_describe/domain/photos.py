"""Domain models for uploaded photos."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from photo_describe.domain.errors import InvalidScopeError


class PhotoStatus(StrEnum):
    """Lifecycle status of a photo record."""

    PENDING = "pending"
    DONE = "done"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self is not PhotoStatus.PENDING


@dataclass(frozen=True)
class SessionScope:
    """Photos owned by an anonymous browser session."""

    session_id: str


@dataclass(frozen=True)
class UserScope:
    """Photos owned by a signed-in user."""

    user_id: str


Scope = SessionScope | UserScope


@dataclass(frozen=True)
class PhotoRecord:
    """Represents a persisted photo and its analysis state."""

    id: UUID
    scope: Scope | None
    storage_id: str
    status: PhotoStatus
    created_at: datetime
    description: str | None = None
    error: str | None = None

    def is_visible_to(self, scope: Scope) -> bool:
        """Return true when the scope may read this record.

        Legacy records without a stored scope are visible to everyone.
        """
        return self.scope is None or self.scope == scope


@dataclass(frozen=True)
class UploadTarget:
    """A signed upload destination for a single object."""

    upload_url: str
    storage_id: str


@dataclass(frozen=True)
class AnalysisOutcome:
    """Result of one analysis worker run."""

    photo_id: UUID
    status: PhotoStatus
    description: str | None = None
    error: str | None = None
    written: bool = True


def scope_label(scope: Scope) -> str:
    """Render a scope for logs."""
    if isinstance(scope, SessionScope):
        return f"session:{scope.session_id}"
    return f"user:{scope.user_id}"


def parse_scope(session_id: str | None, user_id: str | None) -> Scope:
    """Build a scope from exactly one of a session id or a user id."""
    session_id = (session_id or "").strip()
    user_id = (user_id or "").strip()
    if session_id and user_id:
        raise InvalidScopeError("Provide either a session id or a user id, not both")
    if session_id:
        return SessionScope(session_id=session_id)
    if user_id:
        return UserScope(user_id=user_id)
    raise InvalidScopeError("A session id or user id is required")
