"""Library management API - LOCAL DATA ONLY!

Structure:
- scan.py: scan trigger, cancellation and scan history (/scan, /scan/cancel, /scans)
"""

from fastapi import APIRouter

from .scan import router as scan_router

# Main library router - aggregates all sub-routers
router = APIRouter(prefix="/library", tags=["library"])

router.include_router(scan_router)

__all__ = ["router"]
