"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool

from gas_genie.api.models import StorageUsageResponse

if TYPE_CHECKING:
    from gas_genie.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/calls", dependencies=[Depends(require_admin)])
async def list_calls(request: Request, limit: int = 50) -> dict[str, object]:
    """Return recent voice calls with dashboard totals."""
    container: AppContainer = request.app.state.container
    stats, calls = await run_in_threadpool(
        container.admin_service.call_report, datetime.now(tz=UTC).date(), limit
    )
    return {
        "stats": {
            "total_calls": stats.total_calls,
            "total_minutes": stats.total_minutes,
            "active_users": stats.active_users,
            "calls_today": stats.calls_today,
        },
        "calls": calls,
    }


@router.get("/storage", dependencies=[Depends(require_admin)])
async def storage_usage(request: Request) -> StorageUsageResponse:
    """Return the estimated photo storage usage."""
    container: AppContainer = request.app.state.container
    snapshot = await run_in_threadpool(container.admin_service.storage_usage)
    return StorageUsageResponse.from_snapshot(snapshot)


@router.post("/storage/evict", dependencies=[Depends(require_admin)])
async def evict_storage(request: Request) -> dict[str, object]:
    """Run eviction now if storage is above the high watermark."""
    container: AppContainer = request.app.state.container
    result = await run_in_threadpool(container.admin_service.evict_now)
    if result is None:
        return {"evicted": False, "deleted_count": 0}
    return {
        "evicted": True,
        "deleted_count": result.deleted_count,
        "skipped_count": result.skipped_count,
        "remaining_usage_bytes": int(result.remaining_usage_bytes),
    }
