"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from photo_describe.adapters.openai_vision_client import OpenAIVisionClient
from photo_describe.adapters.supabase_object_storage import SupabaseObjectStorage
from photo_describe.adapters.supabase_photo_repository import SupabasePhotoRepository
from photo_describe.adapters.supabase_trivia_repository import (
    SupabaseTriviaRepository,
)
from photo_describe.config import Settings
from photo_describe.services.analysis import AnalysisService
from photo_describe.services.photos import PhotoService
from photo_describe.services.scheduler import AsyncioJobScheduler
from photo_describe.services.subscriber import PhotoSubscriber
from photo_describe.services.trivia import TriviaService
from photo_describe.services.vision import VisionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    photo_service: PhotoService
    analysis_service: AnalysisService
    trivia_service: TriviaService
    subscriber: PhotoSubscriber
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    photo_repository = SupabasePhotoRepository(supabase_client)
    storage = SupabaseObjectStorage(
        client=supabase_client,
        bucket=resolved_settings.storage_bucket,
        signed_url_ttl_seconds=resolved_settings.signed_url_ttl_seconds,
    )
    openai_client = OpenAIVisionClient.create(
        resolved_settings.openai_api_key,
        timeout=resolved_settings.openai_timeout_seconds,
    )
    vision_service = VisionService(
        client=openai_client,
        model=resolved_settings.openai_model,
        max_tokens=resolved_settings.openai_max_tokens,
        prompt=resolved_settings.description_prompt,
    )
    analysis_service = AnalysisService(
        repository=photo_repository,
        storage=storage,
        vision_service=vision_service,
        guard_terminal_writes=resolved_settings.guard_terminal_writes,
    )
    scheduler = AsyncioJobScheduler()
    photo_service = PhotoService(
        repository=photo_repository,
        storage=storage,
        scheduler=scheduler,
        analysis_job=analysis_service.describe_photo,
        analysis_delay_ms=resolved_settings.analysis_delay_ms,
    )
    trivia_service = TriviaService(SupabaseTriviaRepository(supabase_client))
    subscriber = PhotoSubscriber(
        photo_service=photo_service,
        poll_interval_seconds=resolved_settings.subscriber_poll_interval_seconds,
    )

    async def close_resources() -> None:
        await scheduler.drain()
        await openai_client.client.close()

    return AppContainer(
        settings=resolved_settings,
        photo_service=photo_service,
        analysis_service=analysis_service,
        trivia_service=trivia_service,
        subscriber=subscriber,
        close_resources=close_resources,
    )
