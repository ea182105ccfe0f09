"""Settings management API endpoints."""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from artshelf.api.dependencies import get_app_settings_service
from artshelf.application.services.app_settings_service import AppSettingsService

logger = logging.getLogger(__name__)

router = APIRouter()


class ScanPathResponse(BaseModel):
    """Currently effective scan path (DB value, else env fallback)."""

    scan_path: str | None = Field(description="Library root directory, or null if unset")


class ScanPathUpdate(BaseModel):
    scan_path: str = Field(min_length=1, description="Library root directory")


@router.get("/scan-path", response_model=ScanPathResponse)
async def get_scan_path(
    service: AppSettingsService = Depends(get_app_settings_service),
) -> ScanPathResponse:
    """Get the configured library scan path."""
    return ScanPathResponse(scan_path=await service.get_scan_path())


# Hey future me - NO existence check here on purpose! A NAS mount may be offline right now
# and come back later. The scanner reports a bad path in its summary instead.
@router.put("/scan-path", response_model=ScanPathResponse)
async def update_scan_path(
    update: ScanPathUpdate,
    service: AppSettingsService = Depends(get_app_settings_service),
) -> ScanPathResponse:
    """Set the library scan path (last write wins)."""
    value = await service.set_scan_path(update.scan_path)
    return ScanPathResponse(scan_path=value)
