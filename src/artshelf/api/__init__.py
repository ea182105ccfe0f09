"""API module for ArtShelf.

Structure:
- routers/: API endpoints (library scan, settings, artworks)
- dependencies.py: Dependency injection (DB session, services)
- exception_handlers.py: Global error handlers

The main entry point is `api_router`, mounted under /api in main.py.
"""

from artshelf.api.routers import api_router

__all__ = ["api_router"]
