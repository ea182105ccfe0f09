"""FastAPI application factory.

Run with: uvicorn artshelf.main:app
"""

from fastapi import FastAPI

from artshelf import __version__
from artshelf.api import api_router
from artshelf.api.exception_handlers import register_exception_handlers
from artshelf.config import Settings
from artshelf.infrastructure.lifecycle import lifespan


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Explicit settings (tests). None = env settings at startup.
    """
    app = FastAPI(
        title="ArtShelf",
        version=__version__,
        lifespan=lifespan,
    )
    if settings is not None:
        app.state.settings = settings

    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api")
    return app


app = create_app()
