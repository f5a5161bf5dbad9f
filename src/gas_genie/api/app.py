"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gas_genie.api.admin import router as admin_router
from gas_genie.api.dependencies import require_user
from gas_genie.api.models import (
    DescriptionUpdate,
    DiagnoseRequest,
    PhotoResponse,
    RegulationSearchRequest,
    StorageUsageResponse,
)
from gas_genie.app_logging import configure_logging
from gas_genie.config import parse_cors_origins
from gas_genie.containers import AppContainer
from gas_genie.domain.diagnosis import PhotoDiagnosis
from gas_genie.domain.regulations import RegulationSearchResult
from gas_genie.domain.voice import ToolCallWebhook
from gas_genie.errors import (
    AuthenticationError,
    DiagnosisError,
    EmbeddingError,
    GasGenieError,
    PhotoCatalogError,
    PhotoDeleteError,
    PhotoNotFoundError,
    PhotoUploadError,
    ShareLinkError,
)

_ERROR_STATUS: dict[type[GasGenieError], int] = {
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    PhotoNotFoundError: status.HTTP_404_NOT_FOUND,
    PhotoUploadError: status.HTTP_502_BAD_GATEWAY,
    PhotoCatalogError: status.HTTP_502_BAD_GATEWAY,
    PhotoDeleteError: status.HTTP_502_BAD_GATEWAY,
    DiagnosisError: status.HTTP_502_BAD_GATEWAY,
    EmbeddingError: status.HTTP_502_BAD_GATEWAY,
}


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_cors_origins(container.settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(admin_router)

    @app.exception_handler(GasGenieError)
    async def handle_app_error(request: Request, exc: GasGenieError) -> JSONResponse:
        if isinstance(exc, ShareLinkError):
            status_code = exc.status_code
        else:
            status_code = _ERROR_STATUS.get(
                type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR
            )
        return JSONResponse(status_code=status_code, content={"detail": exc.message})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/photos", status_code=status.HTTP_201_CREATED)
    async def upload_photo(  # noqa: PLR0913
        request: Request,
        description: str | None = None,
        job_id: str | None = None,
        filename: str | None = None,
        user_id: str = Depends(require_user),
    ) -> PhotoResponse:
        """Upload a resized photo sent as the raw request body."""
        content_type = request.headers.get("content-type")
        if content_type and not content_type.startswith("image/"):
            raise HTTPException(
                status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
                detail="Photos must be sent as an image content type",
            )
        body = await request.body()
        if not body:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Photo body is empty",
            )
        state_container: AppContainer = request.app.state.container
        record = await run_in_threadpool(
            state_container.upload_gate.upload,
            user_id=user_id,
            file_bytes=body,
            content_type=content_type,
            filename=filename,
            description=description,
            job_id=job_id,
        )
        return PhotoResponse.from_record(record)

    @app.get("/photos")
    async def list_photos(
        request: Request, user_id: str = Depends(require_user)
    ) -> dict[str, list[PhotoResponse]]:
        """Return the caller's photos, newest first."""
        state_container: AppContainer = request.app.state.container
        photos = await run_in_threadpool(
            state_container.photo_service.list_photos, user_id
        )
        return {"photos": [PhotoResponse.from_record(photo) for photo in photos]}

    @app.patch("/photos/{photo_id}")
    async def update_photo(
        photo_id: str,
        update: DescriptionUpdate,
        request: Request,
        user_id: str = Depends(require_user),
    ) -> PhotoResponse:
        """Change a photo's description."""
        state_container: AppContainer = request.app.state.container
        record = await run_in_threadpool(
            state_container.photo_service.update_description,
            user_id,
            photo_id,
            update.description,
        )
        return PhotoResponse.from_record(record)

    @app.delete("/photos/{photo_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_photo(
        photo_id: str, request: Request, user_id: str = Depends(require_user)
    ) -> Response:
        """Delete one of the caller's photos."""
        state_container: AppContainer = request.app.state.container
        await run_in_threadpool(
            state_container.photo_service.delete_photo, user_id, photo_id
        )
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/storage/usage", dependencies=[Depends(require_user)])
    async def storage_usage(request: Request) -> StorageUsageResponse:
        """Return the estimated photo storage usage."""
        state_container: AppContainer = request.app.state.container
        snapshot = await run_in_threadpool(state_container.photo_service.usage)
        return StorageUsageResponse.from_snapshot(snapshot)

    @app.post("/photos/diagnose")
    async def diagnose_photo(
        payload: DiagnoseRequest,
        request: Request,
        user_id: str = Depends(require_user),
    ) -> PhotoDiagnosis:
        """Diagnose faults visible in an uploaded photo."""
        state_container: AppContainer = request.app.state.container
        return await state_container.diagnosis_service.diagnose(
            payload.photo_url, user_id
        )

    @app.post("/regulations/search", dependencies=[Depends(require_user)])
    async def search_regulations(
        payload: RegulationSearchRequest, request: Request
    ) -> RegulationSearchResult:
        """Search gas and plumbing regulations."""
        state_container: AppContainer = request.app.state.container
        return await state_container.regulation_search_service.search(
            payload.query, payload.limit
        )

    @app.post("/voice/tools")
    async def voice_tools(payload: ToolCallWebhook, request: Request) -> JSONResponse:
        """Handle tool calls requested by the voice assistant."""
        state_container: AppContainer = request.app.state.container
        tool_calls = payload.message.tool_calls if payload.message else []
        if not tool_calls:
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"error": "No tool calls found"},
            )
        try:
            result = await state_container.voice_tool_service.handle(tool_calls[0])
        except Exception:
            logger.exception("Voice tool handler failed")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": "Internal server error"},
            )
        return JSONResponse(content={"results": [result.model_dump(by_alias=True)]})

    @app.get("/share/{share_token}")
    async def shared_document(share_token: str, request: Request) -> dict[str, object]:
        """Return a document shared with a customer."""
        state_container: AppContainer = request.app.state.container
        shared = await run_in_threadpool(
            state_container.sharing_service.get_shared_document, share_token
        )
        return {
            "document_type": shared.document_type,
            "document": shared.document,
            "engineer": shared.engineer,
        }

    return app
