"""Live photo subscription and the client-side result state machine."""

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from enum import StrEnum
from uuid import UUID

from photo_describe.domain.photos import PhotoStatus, Scope
from photo_describe.domain.trivia import MadLibTrivia
from photo_describe.services.narrative import (
    HOW_BUTTON_LABEL,
    WHY_BUTTON_LABEL,
    WHY_TEXT,
    render_mad_lib,
)
from photo_describe.services.photos import PhotoService, PhotoView

ANALYZING_TEXT = "Analyzing photo..."
FALLBACK_ERROR = "Something went wrong."


@dataclass
class PhotoSubscriber:
    """Polls a scoped photo and yields a snapshot on every status change."""

    photo_service: PhotoService
    poll_interval_seconds: float = 1.0
    max_polls: int | None = None

    async def watch(self, photo_id: UUID, scope: Scope) -> AsyncIterator[PhotoView]:
        """Yield photo snapshots until a terminal status or loss of visibility."""
        last_status: PhotoStatus | None = None
        polls = 0
        while True:
            view = self.photo_service.get_photo(photo_id, scope)
            if view is None:
                return
            if view.record.status != last_status:
                last_status = view.record.status
                yield view
            if view.record.status.is_terminal:
                return
            polls += 1
            if self.max_polls is not None and polls >= self.max_polls:
                return
            await asyncio.sleep(self.poll_interval_seconds)


class UiStatus(StrEnum):
    IDLE = "idle"
    PENDING = "pending"
    DONE = "done"
    ERROR = "error"


class RevealStage(StrEnum):
    HIDDEN = "hidden"
    READY = "ready"
    WHY = "why"
    HOW = "how"


@dataclass(frozen=True)
class ClientPrompt:
    """What the result area should show right now."""

    text: str | None
    button_label: str | None = None
    button_enabled: bool = False
    can_reset: bool = False


@dataclass
class PhotoClientState:
    """Projects store status onto local UI state.

    The reveal after ``done`` only moves forward on explicit ``advance`` calls.
    """

    status: UiStatus = UiStatus.IDLE
    photo_id: UUID | None = None
    error: str = ""
    description: str | None = None
    stage: RevealStage = RevealStage.HIDDEN
    narrative: str | None = None
    _last_store_status: PhotoStatus | None = field(default=None, repr=False)

    def submitted(self, photo_id: UUID) -> None:
        """Record a saved upload and start waiting for analysis."""
        self.reset()
        self.photo_id = photo_id
        self.status = UiStatus.PENDING

    def fail(self, message: str) -> None:
        """Record a client-side failure, such as a rejected upload."""
        self.status = UiStatus.ERROR
        self.error = message or FALLBACK_ERROR
        self.stage = RevealStage.HIDDEN

    def apply(self, view: PhotoView) -> bool:
        """Apply a store snapshot; returns whether local state changed."""
        record = view.record
        if record.status == self._last_store_status:
            return False
        self._last_store_status = record.status
        if record.status is PhotoStatus.PENDING:
            self.status = UiStatus.PENDING
            self.stage = RevealStage.HIDDEN
        elif record.status is PhotoStatus.DONE:
            self.status = UiStatus.DONE
            self.description = record.description
            self.stage = RevealStage.READY
        else:
            self.status = UiStatus.ERROR
            self.error = record.error or FALLBACK_ERROR
            self.stage = RevealStage.HIDDEN
        return True

    def advance(self, trivia: MadLibTrivia | None = None) -> RevealStage:
        """Handle a reveal button press."""
        if self.status is not UiStatus.DONE:
            return self.stage
        if self.stage is RevealStage.READY:
            self.stage = RevealStage.WHY
        elif self.stage is RevealStage.WHY:
            if trivia is None:
                raise ValueError("Trivia is required to render the final stage")
            self.narrative = render_mad_lib(self.description, trivia)
            self.stage = RevealStage.HOW
        return self.stage

    def reset(self) -> None:
        """Clear all local state and return to the upload step."""
        self.status = UiStatus.IDLE
        self.photo_id = None
        self.error = ""
        self.description = None
        self.stage = RevealStage.HIDDEN
        self.narrative = None
        self._last_store_status = None

    def prompt(self) -> ClientPrompt:
        """Return the content of the result area for the current state."""
        if self.status is UiStatus.PENDING:
            return ClientPrompt(text=ANALYZING_TEXT)
        if self.status is UiStatus.ERROR:
            return ClientPrompt(text=f"Error: {self.error}", can_reset=True)
        if self.status is UiStatus.DONE:
            if self.stage is RevealStage.READY:
                return ClientPrompt(
                    text=None,
                    button_label=WHY_BUTTON_LABEL,
                    button_enabled=True,
                    can_reset=True,
                )
            if self.stage is RevealStage.WHY:
                return ClientPrompt(
                    text=WHY_TEXT,
                    button_label=HOW_BUTTON_LABEL,
                    button_enabled=True,
                    can_reset=True,
                )
            return ClientPrompt(
                text=self.narrative,
                button_label=HOW_BUTTON_LABEL,
                can_reset=True,
            )
        return ClientPrompt(text=None)


async def follow(
    subscriber: PhotoSubscriber,
    state: PhotoClientState,
    scope: Scope,
) -> PhotoClientState:
    """Drive a client state from a live subscription until it settles."""
    if state.photo_id is None:
        return state
    async for view in subscriber.watch(state.photo_id, scope):
        state.apply(view)
    return state
