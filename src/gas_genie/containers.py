"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from openai import AsyncOpenAI
from supabase import create_client

from gas_genie.adapters.image_fetcher import HttpxImageFetcher
from gas_genie.adapters.openai_embedding_client import OpenAIEmbeddingClient
from gas_genie.adapters.openai_vision_client import OpenAIVisionClient
from gas_genie.adapters.supabase_admin_repository import SupabaseAdminRepository
from gas_genie.adapters.supabase_analysis_repository import (
    SupabaseAnalysisRepository,
)
from gas_genie.adapters.supabase_auth import SupabaseAccessTokenVerifier
from gas_genie.adapters.supabase_object_store import SupabaseObjectStore
from gas_genie.adapters.supabase_photo_repository import SupabasePhotoRepository
from gas_genie.adapters.supabase_regulation_repository import (
    SupabaseRegulationRepository,
)
from gas_genie.adapters.supabase_share_repository import SupabaseShareRepository
from gas_genie.adapters.supabase_work_log_repository import (
    SupabaseWorkLogRepository,
)
from gas_genie.config import Settings
from gas_genie.services.admin import AdminService
from gas_genie.services.auth import AccessTokenVerifier
from gas_genie.services.diagnosis import DiagnosisService
from gas_genie.services.eviction import EvictionPolicy
from gas_genie.services.leases import InMemoryLeaseManager
from gas_genie.services.photos import PhotoService
from gas_genie.services.quota import QuotaEstimator
from gas_genie.services.regulations import RegulationSearchService
from gas_genie.services.sharing import SharingService
from gas_genie.services.uploads import UploadGate
from gas_genie.services.voice_tools import VoiceToolService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    token_verifier: AccessTokenVerifier
    upload_gate: UploadGate
    photo_service: PhotoService
    diagnosis_service: DiagnosisService
    regulation_search_service: RegulationSearchService
    voice_tool_service: VoiceToolService
    sharing_service: SharingService
    admin_service: AdminService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    object_store = SupabaseObjectStore(
        client=supabase_client, bucket=resolved_settings.photo_bucket
    )
    photo_repository = SupabasePhotoRepository(supabase_client)
    estimator = QuotaEstimator(object_store)
    eviction_policy = EvictionPolicy(
        photo_repository=photo_repository, object_store=object_store
    )
    upload_gate = UploadGate(
        object_store=object_store,
        photo_repository=photo_repository,
        estimator=estimator,
        eviction_policy=eviction_policy,
        lease_manager=InMemoryLeaseManager(),
        namespace=resolved_settings.photo_bucket,
        lease_timeout_seconds=resolved_settings.eviction_lease_timeout_seconds,
    )
    photo_service = PhotoService(
        photo_repository=photo_repository,
        object_store=object_store,
        estimator=estimator,
    )

    openai_client = AsyncOpenAI(api_key=resolved_settings.openai_api_key)
    image_fetcher = HttpxImageFetcher.create()
    diagnosis_service = DiagnosisService(
        client=OpenAIVisionClient(client=openai_client),
        image_fetcher=image_fetcher,
        repository=SupabaseAnalysisRepository(supabase_client),
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    regulation_search_service = RegulationSearchService(
        embedding_client=OpenAIEmbeddingClient(client=openai_client),
        repository=SupabaseRegulationRepository(supabase_client),
        embedding_model=resolved_settings.openai_embedding_model,
    )
    voice_tool_service = VoiceToolService(
        regulation_search=regulation_search_service,
        repository=SupabaseWorkLogRepository(supabase_client),
    )
    sharing_service = SharingService(SupabaseShareRepository(supabase_client))
    admin_service = AdminService(
        admin_repository=SupabaseAdminRepository(supabase_client),
        upload_gate=upload_gate,
    )

    async def close_resources() -> None:
        await image_fetcher.close()
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        token_verifier=SupabaseAccessTokenVerifier(supabase_client),
        upload_gate=upload_gate,
        photo_service=photo_service,
        diagnosis_service=diagnosis_service,
        regulation_search_service=regulation_search_service,
        voice_tool_service=voice_tool_service,
        sharing_service=sharing_service,
        admin_service=admin_service,
        close_resources=close_resources,
    )
