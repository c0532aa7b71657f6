"""Domain exceptions."""

from uuid import UUID


class PhotoNotFoundError(LookupError):
    """Raised when a write targets a photo record that does not exist."""

    def __init__(self, photo_id: UUID) -> None:
        super().__init__(f"Photo {photo_id} not found")
        self.photo_id = photo_id


class InvalidScopeError(ValueError):
    """Raised when a caller supplies no scope or more than one."""


class VisionRequestError(RuntimeError):
    """Failure returned by the vision model provider."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
        timed_out: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.timed_out = timed_out
