"""Shared test fixtures."""

from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from gas_genie.config import Settings
from gas_genie.containers import AppContainer
from gas_genie.domain.admin import VoiceCall
from gas_genie.domain.photos import PhotoRecord
from gas_genie.domain.sharing import ShareLink
from gas_genie.domain.storage import EvictionResult, StoredObject
from gas_genie.errors import AuthenticationError
from gas_genie.services.admin import AdminRepository, AdminService
from gas_genie.services.auth import AccessTokenVerifier
from gas_genie.services.diagnosis import (
    AnalysisRepository,
    DiagnosisService,
    ImageFetcher,
    VisionClient,
)
from gas_genie.services.eviction import EvictionPolicy
from gas_genie.services.leases import InMemoryLeaseManager
from gas_genie.services.photos import PhotoRepository, PhotoService
from gas_genie.services.quota import ObjectStore, QuotaEstimator
from gas_genie.services.regulations import (
    EmbeddingClient,
    RegulationRepository,
    RegulationSearchService,
)
from gas_genie.services.sharing import SharingService, ShareRepository
from gas_genie.services.uploads import UploadGate
from gas_genie.services.voice_tools import VoiceToolService, WorkLogRepository

BASE_TIME = datetime(2025, 1, 6, 8, 0, tzinfo=UTC)
TEST_SUPABASE_KEY = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9.eyJyb2xlIjoic2VydmljZV9yb2xlIn0.signature"
)


@dataclass
class InMemoryObjectStore(ObjectStore):
    """In-memory object store for tests, with failure injection."""

    objects: dict[str, bytes] = field(default_factory=dict)
    content_types: dict[str, str] = field(default_factory=dict)
    fail_put: bool = False
    fail_list: bool = False
    fail_delete_keys: set[str] = field(default_factory=set)
    deleted: list[str] = field(default_factory=list)

    def list_objects(self, prefix: str) -> list[StoredObject]:
        if self.fail_list:
            raise RuntimeError("listing failed")
        entries: dict[str, StoredObject] = {}
        base = f"{prefix}/" if prefix else ""
        for key, data in self.objects.items():
            if not key.startswith(base):
                continue
            name, slash, _rest = key[len(base) :].partition("/")
            child_key = f"{base}{name}"
            if slash:
                entries[child_key] = StoredObject(key=child_key, is_folder=True)
            else:
                entries[child_key] = StoredObject(key=child_key, size=len(data))
        return list(entries.values())

    def put(self, key: str, data: bytes, content_type: str) -> str:
        if self.fail_put:
            raise RuntimeError("bucket unavailable")
        self.objects[key] = data
        self.content_types[key] = content_type
        return self.get_public_url(key)

    def delete(self, key: str) -> None:
        if key in self.fail_delete_keys:
            raise RuntimeError(f"cannot delete {key}")
        self.objects.pop(key, None)
        self.deleted.append(key)

    def get_public_url(self, key: str) -> str:
        return f"https://storage.example.com/job-photos/{key}"


@dataclass
class InMemoryPhotoRepository(PhotoRepository):
    """In-memory photo catalog for tests."""

    photos: dict[str, PhotoRecord] = field(default_factory=dict)
    fail_create: bool = False
    fail_delete_ids: set[str] = field(default_factory=set)

    def create_photo(  # noqa: PLR0913
        self,
        storage_key: str,
        file_url: str,
        uploaded_by: str,
        description: str | None,
        job_id: str | None,
    ) -> PhotoRecord:
        if self.fail_create:
            raise RuntimeError("catalog unavailable")
        uploaded_at = (
            max(photo.uploaded_at for photo in self.photos.values())
            + timedelta(seconds=1)
            if self.photos
            else BASE_TIME
        )
        record = PhotoRecord(
            id=str(uuid4()),
            storage_key=storage_key,
            uploaded_by=uploaded_by,
            uploaded_at=uploaded_at,
            description=description,
            job_id=job_id,
            file_url=file_url,
        )
        self.photos[record.id] = record
        return record

    def add(self, record: PhotoRecord) -> PhotoRecord:
        self.photos[record.id] = record
        return record

    def get_photo(self, photo_id: str) -> PhotoRecord | None:
        return self.photos.get(photo_id)

    def list_for_user(self, user_id: str) -> list[PhotoRecord]:
        owned = [p for p in self.photos.values() if p.uploaded_by == user_id]
        return sorted(owned, key=lambda p: p.uploaded_at, reverse=True)

    def list_oldest_first(self) -> list[PhotoRecord]:
        return sorted(self.photos.values(), key=lambda p: p.uploaded_at)

    def update_description(self, photo_id: str, description: str | None) -> None:
        photo = self.photos[photo_id]
        self.photos[photo_id] = PhotoRecord(
            id=photo.id,
            storage_key=photo.storage_key,
            uploaded_by=photo.uploaded_by,
            uploaded_at=photo.uploaded_at,
            description=description,
            job_id=photo.job_id,
            file_url=photo.file_url,
        )

    def delete_photo(self, photo_id: str) -> None:
        if photo_id in self.fail_delete_ids:
            raise RuntimeError(f"cannot delete record {photo_id}")
        self.photos.pop(photo_id, None)


def seed_photos(
    store: InMemoryObjectStore,
    repository: InMemoryPhotoRepository,
    count: int,
    users: tuple[str, ...] = ("user-a", "user-b"),
) -> list[PhotoRecord]:
    """Create count photos with strictly increasing upload times."""
    records = []
    start = BASE_TIME - timedelta(days=365)
    for index in range(count):
        user_id = users[index % len(users)]
        key = f"{user_id}/{index:06d}.jpg"
        store.objects[key] = b"x"
        records.append(
            repository.add(
                PhotoRecord(
                    id=f"photo-{index:06d}",
                    storage_key=key,
                    uploaded_by=user_id,
                    uploaded_at=start + timedelta(minutes=index),
                )
            )
        )
    return records


@dataclass
class CountingEvictionPolicy(EvictionPolicy):
    """Eviction policy that records how often it runs."""

    calls: list[float] = field(default_factory=list)

    def run_eviction(self, current_usage_bytes: float) -> EvictionResult:
        self.calls.append(current_usage_bytes)
        return super().run_eviction(current_usage_bytes)


@dataclass
class BusyLeaseManager:
    """Lease manager whose leases are always held elsewhere."""

    attempts: list[str] = field(default_factory=list)

    def acquire(self, namespace: str, timeout: float) -> AbstractContextManager[bool]:
        self.attempts.append(namespace)
        return self._busy()

    @contextmanager
    def _busy(self) -> Iterator[bool]:
        yield False


@dataclass
class FakeVisionClient(VisionClient):
    """Fake vision client returning a fixed payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "diagnosis": "Vaillant ecoTEC showing F28, ignition failure.",
            "severity": "medium",
            "possible_causes": ["Gas supply issue", "Faulty ignition electrode"],
            "next_steps": ["Check gas supply pressure", "Inspect the electrode"],
            "safety_warning": None,
            "confidence": 0.82,
        }
    )
    error: Exception | None = None
    prompts: list[str] = field(default_factory=list)
    image_urls: list[str] = field(default_factory=list)

    async def extract(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        self.prompts.append(prompt)
        self.image_urls.append(image_data_url)
        if self.error is not None:
            raise self.error
        return self.payload


@dataclass
class FakeImageFetcher(ImageFetcher):
    """Fake image fetcher returning static bytes."""

    content: bytes = b"\x89PNG\r\n\x1a\nfake-image"
    content_type: str | None = "image/png"
    error: Exception | None = None

    async def fetch(self, url: str) -> tuple[bytes, str | None]:
        if self.error is not None:
            raise self.error
        return self.content, self.content_type


@dataclass
class InMemoryAnalysisRepository(AnalysisRepository):
    """In-memory analysis storage for tests."""

    analyses: list[dict[str, object]] = field(default_factory=list)

    def create_analysis(
        self,
        user_id: str,
        photo_url: str,
        analysis: dict[str, object],
        model_used: str,
    ) -> None:
        self.analyses.append(
            {
                "user_id": user_id,
                "photo_url": photo_url,
                "analysis": analysis,
                "model_used": model_used,
            }
        )


@dataclass
class FakeEmbeddingClient(EmbeddingClient):
    """Fake embedding client returning a fixed vector."""

    vector: list[float] = field(default_factory=lambda: [0.1, 0.2, 0.3])
    error: Exception | None = None

    async def embed(self, *, model: str, text: str) -> list[float]:
        if self.error is not None:
            raise self.error
        return self.vector


@dataclass
class InMemoryRegulationRepository(RegulationRepository):
    """In-memory regulation chunks for tests."""

    chunks: list[dict[str, object]] = field(
        default_factory=lambda: [
            {
                "source": "Gas Safety (Installation and Use) Regulations 1998",
                "section": "Regulation 26(9)",
                "content": "Appliances must be checked for safe operation.",
                "similarity": 0.913,
            },
            {
                "source": "BS 5440-1",
                "section": "Flue termination",
                "content": "Flue terminals must be clear of openings.",
                "similarity": 0.78,
            },
        ]
    )
    vector_error: Exception | None = None
    text_queries: list[str] = field(default_factory=list)

    def match_regulations(
        self, embedding: list[float], threshold: float, count: int
    ) -> list[dict[str, object]]:
        if self.vector_error is not None:
            raise self.vector_error
        return [c for c in self.chunks if float(c["similarity"]) >= threshold][:count]

    def text_search(self, query: str, limit: int) -> list[dict[str, object]]:
        self.text_queries.append(query)
        return [
            {k: v for k, v in chunk.items() if k != "similarity"}
            for chunk in self.chunks[:limit]
        ]


@dataclass
class InMemoryWorkLogRepository(WorkLogRepository):
    """In-memory work log storage for tests."""

    rows: dict[str, list[dict[str, object]]] = field(default_factory=dict)

    def insert(self, table: str, payload: dict[str, object]) -> None:
        self.rows.setdefault(table, []).append(payload)


@dataclass
class InMemoryShareRepository(ShareRepository):
    """In-memory share links and documents for tests."""

    links: dict[str, ShareLink] = field(default_factory=dict)
    documents: dict[str, dict[str, dict[str, object]]] = field(default_factory=dict)
    profiles: dict[str, dict[str, object]] = field(default_factory=dict)

    def get_share_link(self, share_token: str) -> ShareLink | None:
        return self.links.get(share_token)

    def get_document(self, table: str, document_id: str) -> dict[str, object] | None:
        return self.documents.get(table, {}).get(document_id)

    def get_profile(self, engineer_id: str) -> dict[str, object] | None:
        return self.profiles.get(engineer_id)


@dataclass
class InMemoryAdminRepository(AdminRepository):
    """In-memory admin data for tests."""

    calls: list[VoiceCall] = field(default_factory=list)
    requested_limits: list[int] = field(default_factory=list)

    def list_recent_calls(self, limit: int) -> list[VoiceCall]:
        self.requested_limits.append(limit)
        ordered = sorted(
            self.calls,
            key=lambda call: call.started_at or datetime.min.replace(tzinfo=UTC),
            reverse=True,
        )
        return ordered[:limit]


@dataclass
class FakeTokenVerifier(AccessTokenVerifier):
    """Token verifier mapping fixed tokens to user ids."""

    tokens: dict[str, str] = field(
        default_factory=lambda: {"token-a": "user-a", "token-b": "user-b"}
    )

    def resolve_user_id(self, access_token: str) -> str:
        user_id = self.tokens.get(access_token)
        if user_id is None:
            raise AuthenticationError("Invalid access token")
        return user_id


def build_upload_gate(
    store: InMemoryObjectStore,
    repository: InMemoryPhotoRepository,
    lease_manager: object | None = None,
) -> UploadGate:
    """Wire an upload gate over in-memory collaborators."""
    return UploadGate(
        object_store=store,
        photo_repository=repository,
        estimator=QuotaEstimator(store),
        eviction_policy=CountingEvictionPolicy(
            photo_repository=repository, object_store=store
        ),
        lease_manager=lease_manager or InMemoryLeaseManager(),
        namespace="job-photos",
        lease_timeout_seconds=0.05,
        clock=lambda: BASE_TIME,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=TEST_SUPABASE_KEY,
        admin_token="admin-token",
        openai_api_key="openai-key",
    )


@pytest.fixture
def object_store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def photo_repository() -> InMemoryPhotoRepository:
    return InMemoryPhotoRepository()


@pytest.fixture
def container(
    settings: Settings,
    object_store: InMemoryObjectStore,
    photo_repository: InMemoryPhotoRepository,
) -> AppContainer:
    upload_gate = build_upload_gate(object_store, photo_repository)
    photo_service = PhotoService(
        photo_repository=photo_repository,
        object_store=object_store,
        estimator=upload_gate.estimator,
    )
    diagnosis_service = DiagnosisService(
        client=FakeVisionClient(),
        image_fetcher=FakeImageFetcher(),
        repository=InMemoryAnalysisRepository(),
        model=settings.openai_model,
        reasoning_effort=settings.openai_reasoning_effort,
        store=settings.openai_store,
    )
    regulation_search_service = RegulationSearchService(
        embedding_client=FakeEmbeddingClient(),
        repository=InMemoryRegulationRepository(),
        embedding_model=settings.openai_embedding_model,
    )
    voice_tool_service = VoiceToolService(
        regulation_search=regulation_search_service,
        repository=InMemoryWorkLogRepository(),
        clock=lambda: BASE_TIME,
    )
    sharing_service = SharingService(InMemoryShareRepository(), clock=lambda: BASE_TIME)
    admin_service = AdminService(
        admin_repository=InMemoryAdminRepository(), upload_gate=upload_gate
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        token_verifier=FakeTokenVerifier(),
        upload_gate=upload_gate,
        photo_service=photo_service,
        diagnosis_service=diagnosis_service,
        regulation_search_service=regulation_search_service,
        voice_tool_service=voice_tool_service,
        sharing_service=sharing_service,
        admin_service=admin_service,
        close_resources=close_resources,
    )
