"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from photo_describe.config import Settings
from photo_describe.containers import AppContainer
from photo_describe.domain.photos import (
    PhotoRecord,
    PhotoStatus,
    Scope,
    UploadTarget,
)
from photo_describe.domain.trivia import (
    ArchitectureRow,
    BookRow,
    FilmRow,
    MusicRow,
    PodcastRow,
    TriviaCatalog,
    TvShowRow,
    VisualArtRow,
)
from photo_describe.services.analysis import AnalysisService
from photo_describe.services.photos import PhotoRepository, PhotoService
from photo_describe.services.scheduler import Job, JobScheduler
from photo_describe.services.session_ids import KeyValueStorage
from photo_describe.services.storage import ObjectStorage
from photo_describe.services.subscriber import PhotoSubscriber
from photo_describe.services.trivia import TriviaRepository, TriviaService
from photo_describe.services.vision import VisionClient, VisionService

_BASE_TIME = datetime(2024, 1, 1, tzinfo=UTC)

JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"fake-jpeg-body"


@dataclass
class InMemoryPhotoRepository(PhotoRepository):
    """In-memory photo repository for tests."""

    photos: dict[UUID, PhotoRecord] = field(default_factory=dict)
    patches: list[tuple[UUID, dict[str, object]]] = field(default_factory=list)

    def insert(self, scope: Scope, storage_id: str) -> UUID:
        return self._add(scope, storage_id)

    def add_legacy(self, storage_id: str) -> UUID:
        """Insert a record without a scope, as older rows were stored."""
        return self._add(None, storage_id)

    def get(self, photo_id: UUID) -> PhotoRecord | None:
        return self.photos.get(photo_id)

    def list_by_scope(self, scope: Scope) -> list[PhotoRecord]:
        matching = [photo for photo in self.photos.values() if photo.scope == scope]
        return sorted(matching, key=lambda photo: photo.created_at, reverse=True)

    def patch(
        self,
        photo_id: UUID,
        fields: dict[str, object],
        only_if_status: PhotoStatus | None = None,
    ) -> bool:
        current = self.photos.get(photo_id)
        if current is None:
            return False
        if only_if_status is not None and current.status != only_if_status:
            return False
        values = dict(fields)
        if "status" in values:
            values["status"] = PhotoStatus(values["status"])
        self.photos[photo_id] = replace(current, **values)
        self.patches.append((photo_id, fields))
        return True

    def _add(self, scope: Scope | None, storage_id: str) -> UUID:
        photo_id = uuid4()
        self.photos[photo_id] = PhotoRecord(
            id=photo_id,
            scope=scope,
            storage_id=storage_id,
            status=PhotoStatus.PENDING,
            created_at=_BASE_TIME + timedelta(seconds=len(self.photos)),
        )
        return photo_id


@dataclass
class InMemoryObjectStorage(ObjectStorage):
    """In-memory object storage for tests."""

    objects: dict[str, bytes] = field(default_factory=dict)
    downloads: list[str] = field(default_factory=list)

    def put(self, data: bytes) -> str:
        target = self.generate_upload_url()
        self.objects[target.storage_id] = data
        return target.storage_id

    def generate_upload_url(self) -> UploadTarget:
        storage_id = f"uploads/{uuid4().hex}"
        return UploadTarget(
            upload_url=f"https://storage.test/upload/{storage_id}",
            storage_id=storage_id,
        )

    def download(self, storage_id: str) -> bytes | None:
        self.downloads.append(storage_id)
        return self.objects.get(storage_id)

    def get_url(self, storage_id: str) -> str | None:
        if storage_id not in self.objects:
            return None
        return f"https://storage.test/{storage_id}"


@dataclass
class FakeVisionClient(VisionClient):
    """Fake vision client returning queued completions."""

    responses: list[str | None] = field(
        default_factory=lambda: ["A photo that is secretly about everything."]
    )
    calls: list[dict[str, object]] = field(default_factory=list)

    async def describe(
        self,
        *,
        model: str,
        max_tokens: int,
        image_data_url: str,
        prompt: str,
    ) -> str | None:
        self.calls.append(
            {
                "model": model,
                "max_tokens": max_tokens,
                "image_data_url": image_data_url,
                "prompt": prompt,
            }
        )
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]


@dataclass
class RaisingVisionClient(VisionClient):
    """Fake vision client that always raises."""

    error: Exception
    calls: int = 0

    async def describe(
        self,
        *,
        model: str,
        max_tokens: int,
        image_data_url: str,
        prompt: str,
    ) -> str | None:
        self.calls += 1
        raise self.error


@dataclass
class RecordingScheduler(JobScheduler):
    """Scheduler that records jobs and runs them on demand."""

    scheduled: list[tuple[int, Job, object]] = field(default_factory=list)

    def schedule(self, delay_ms: int, job: Job, payload: object) -> None:
        self.scheduled.append((delay_ms, job, payload))

    async def run_all(self) -> list[object]:
        results = []
        while self.scheduled:
            _, job, payload = self.scheduled.pop(0)
            results.append(await job(payload))
        return results


@dataclass
class InMemoryTriviaRepository(TriviaRepository):
    """In-memory trivia repository that counts loads."""

    catalog: TriviaCatalog = field(default_factory=lambda: sample_catalog())
    loads: int = 0

    def load_catalog(self) -> TriviaCatalog:
        self.loads += 1
        return self.catalog


@dataclass
class InMemoryKeyValueStorage(KeyValueStorage):
    """Dictionary-backed key/value storage for tests."""

    items: dict[str, str] = field(default_factory=dict)

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


def sample_catalog() -> TriviaCatalog:
    return TriviaCatalog(
        music=(MusicRow("Hymn Remix", "The Choir", 1999, "3:21", "https://w/1"),),
        films=(FilmRow("The Long Mission", 2003, "PG", "1h 40m", "https://w/2"),),
        tv_shows=(TvShowRow("Family Night", "KBYU", 1988, "Sitcom", "https://w/3"),),
        fiction=(BookRow("Desert Saga", "A. Author", 2005, 412, "https://w/4"),),
        non_fiction=(BookRow("Pioneer Trails", "B. Writer", 1996, 288, "https://w/5"),),
        podcasts=(PodcastRow("Ward Talk", "Pod Co", 2017, "Comedy", "https://p/6"),),
        architecture=(
            ArchitectureRow("The Tabernacle", "H. Builder", 1867, "$300,000", "https://w/7"),
        ),
        visual_art=(VisualArtRow("Sunrise Panel", "C. Painter", 1921, "Mural", "https://w/8"),),
    )


def build_services(
    repository: InMemoryPhotoRepository,
    storage: InMemoryObjectStorage,
    vision_client: VisionClient,
    scheduler: JobScheduler,
    guard_terminal_writes: bool = True,
) -> tuple[PhotoService, AnalysisService]:
    """Wire the photo and analysis services the way the container does."""
    analysis_service = AnalysisService(
        repository=repository,
        storage=storage,
        vision_service=VisionService(
            client=vision_client,
            model="gpt-4.1-nano-2025-04-14",
            max_tokens=128,
            prompt="Describe the image.",
        ),
        guard_terminal_writes=guard_terminal_writes,
    )
    photo_service = PhotoService(
        repository=repository,
        storage=storage,
        scheduler=scheduler,
        analysis_job=analysis_service.describe_photo,
        analysis_delay_ms=2000,
    )
    return photo_service, analysis_service


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        openai_api_key="openai-key",
    )


@pytest.fixture
def photo_repository() -> InMemoryPhotoRepository:
    return InMemoryPhotoRepository()


@pytest.fixture
def storage() -> InMemoryObjectStorage:
    return InMemoryObjectStorage()


@pytest.fixture
def vision_client() -> FakeVisionClient:
    return FakeVisionClient()


@pytest.fixture
def scheduler() -> RecordingScheduler:
    return RecordingScheduler()


@pytest.fixture
def trivia_repository() -> InMemoryTriviaRepository:
    return InMemoryTriviaRepository()


@pytest.fixture
def container(
    settings: Settings,
    photo_repository: InMemoryPhotoRepository,
    storage: InMemoryObjectStorage,
    vision_client: FakeVisionClient,
    scheduler: RecordingScheduler,
    trivia_repository: InMemoryTriviaRepository,
) -> AppContainer:
    photo_service, analysis_service = build_services(
        photo_repository, storage, vision_client, scheduler
    )
    closed: list[bool] = []

    async def close_resources() -> None:
        closed.append(True)

    container = AppContainer(
        settings=settings,
        photo_service=photo_service,
        analysis_service=analysis_service,
        trivia_service=TriviaService(trivia_repository),
        subscriber=PhotoSubscriber(photo_service, poll_interval_seconds=0),
        close_resources=close_resources,
    )
    container.closed = closed  # type: ignore[attr-defined]
    return container
