"""Library scan endpoints - LOCAL ONLY!

Hey future me - this file exposes the reconciliation engine:
- POST /library/scan: run a scan and return the ScanSummary
- POST /library/scan/cancel: stop a running scan at the next artist boundary
- GET /library/scan/status: is a scan running, and what did it last report
- GET /library/scans: recent scan history (library_scans table)

The scan runs inside the request. Partial failures (broken artists, unreadable folders) come
back INSIDE the summary with a 200, never as a 500.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from artshelf.api.dependencies import (
    get_db_session,
    get_library_scanner_service,
    get_scan_lock,
)
from artshelf.application.services.library_scanner_service import LibraryScannerService
from artshelf.infrastructure.persistence.repositories import LibraryScanRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["library-scan"])


# =============================================================================
# Response Models
# =============================================================================


class ScanHistoryEntry(BaseModel):
    """One row of scan history."""

    id: str
    status: str
    scan_path: str
    artists_scanned: int
    artists_created: int
    artists_failed: int
    artworks_scanned: int
    artworks_created: int
    artworks_updated: int
    artworks_skipped: int
    artworks_missing: int
    error_message: str | None = None
    started_at: datetime
    completed_at: datetime | None = None


class CancelResponse(BaseModel):
    cancelled: bool
    message: str


class ScanStatusResponse(BaseModel):
    """Live scan state for polling clients."""

    scanning: bool
    message: str | None = None


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/scan")
async def start_library_scan(
    scanner: LibraryScannerService = Depends(get_library_scanner_service),
    scan_lock: asyncio.Lock = Depends(get_scan_lock),
) -> dict[str, Any]:
    """Scan the configured library path and reconcile it with the database.

    Returns:
        ScanSummary as a dict (status, counters, failed_artists, missing_files, ...)

    Raises:
        HTTPException 409: A scan is already running
    """
    if scan_lock.locked():
        raise HTTPException(status_code=409, detail="A library scan is already running")

    async with scan_lock:
        summary = await scanner.run_scan()

    return summary.to_dict()


@router.post("/scan/cancel", response_model=CancelResponse)
async def cancel_library_scan(
    scanner: LibraryScannerService = Depends(get_library_scanner_service),
    scan_lock: asyncio.Lock = Depends(get_scan_lock),
) -> CancelResponse:
    """Request cancellation of the running scan (no-op if none is running)."""
    if not scan_lock.locked():
        return CancelResponse(cancelled=False, message="No library scan is running")

    scanner.cancel()
    logger.info("Library scan cancellation requested")
    return CancelResponse(
        cancelled=True,
        message="Cancellation requested - scan stops after the current artist",
    )


@router.get("/scan/status", response_model=ScanStatusResponse)
async def get_library_scan_status(
    scanner: LibraryScannerService = Depends(get_library_scanner_service),
) -> ScanStatusResponse:
    """Whether a scan is running, plus its last progress message."""
    return ScanStatusResponse(
        scanning=scanner.scanning,
        message=scanner.last_progress_message,
    )


@router.get("/scans", response_model=list[ScanHistoryEntry])
async def list_library_scans(
    limit: int = Query(20, ge=1, le=200),
    session: AsyncSession = Depends(get_db_session),
) -> list[ScanHistoryEntry]:
    """List recent scans, newest first."""
    scans = await LibraryScanRepository(session).list_recent(limit=limit)
    return [ScanHistoryEntry.model_validate(scan, from_attributes=True) for scan in scans]
