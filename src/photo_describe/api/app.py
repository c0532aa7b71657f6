"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse

from photo_describe.api.models import SessionResponse, serialize_trivia
from photo_describe.api.photos import router as photos_router
from photo_describe.app_logging import configure_logging
from photo_describe.containers import AppContainer
from photo_describe.domain.errors import InvalidScopeError
from photo_describe.services.session_ids import KeyValueStorage, SessionIdProvider

_SESSION_COOKIE_MAX_AGE = 60 * 60 * 24 * 365


@dataclass
class CookieStorage(KeyValueStorage):
    """Key/value storage over request cookies; writes are collected for the response."""

    cookies: Mapping[str, str]
    pending: dict[str, str] = field(default_factory=dict)

    def get_item(self, key: str) -> str | None:
        return self.pending.get(key) or self.cookies.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.pending[key] = value


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            app.state.container.trivia_service.catalog()
        except Exception:
            logger.exception("Failed to load trivia reference tables")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(photos_router)

    @app.exception_handler(InvalidScopeError)
    async def invalid_scope_handler(
        request: Request, exc: InvalidScopeError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/session")
    async def session(request: Request, response: Response) -> SessionResponse:
        """Return the caller's session id, issuing a cookie when missing."""
        state_container: AppContainer = request.app.state.container
        storage = CookieStorage(request.cookies)
        provider = SessionIdProvider(
            storage, key=state_container.settings.session_cookie_name
        )
        session_id = provider.get_session_id()
        for key, value in storage.pending.items():
            response.set_cookie(
                key, value, max_age=_SESSION_COOKIE_MAX_AGE, samesite="lax"
            )
        return SessionResponse(session_id=session_id)

    @app.get("/trivia/mad-lib")
    async def mad_lib_trivia(request: Request) -> dict[str, object]:
        """Return one random reference row per category."""
        state_container: AppContainer = request.app.state.container
        return serialize_trivia(state_container.trivia_service.random_trivia())

    return app
