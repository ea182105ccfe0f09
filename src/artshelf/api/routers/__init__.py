"""API router initialization."""

# Hey future me, this is the MAIN API router aggregator! It gets mounted under /api in main.py,
# so endpoints become /api/library/scan, /api/settings/scan-path, /api/artworks, etc.
# The library router defines its own prefix ("/library") in its package.

from fastapi import APIRouter

from artshelf.api.routers import artworks, library, settings

api_router = APIRouter()

api_router.include_router(library.router, tags=["Library"])
api_router.include_router(settings.router, prefix="/settings", tags=["Settings"])
api_router.include_router(artworks.router, prefix="/artworks", tags=["Artworks"])

__all__ = [
    "api_router",
    "artworks",
    "library",
    "settings",
]
