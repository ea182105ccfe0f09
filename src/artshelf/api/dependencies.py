"""Dependency injection for API endpoints."""

import asyncio
from collections.abc import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from artshelf.application.services.app_settings_service import AppSettingsService
from artshelf.application.services.library_scanner_service import LibraryScannerService
from artshelf.config import Settings
from artshelf.domain.exceptions import DatabaseUnreachableError
from artshelf.infrastructure.persistence.database import Database


def get_app_settings(request: Request) -> Settings:
    """Settings the app was started with (see lifecycle.lifespan)."""
    return request.app.state.settings


# Hey future me - db_ready is False when SELECT 1 failed at startup. The app still boots, but
# anything that needs the DB gets a 503 (see exception_handlers) instead of a cryptic 500.
def _require_db_ready(request: Request) -> None:
    if not getattr(request.app.state, "db_ready", False):
        raise DatabaseUnreachableError("Database connection unavailable")


def get_db(request: Request) -> Database:
    _require_db_ready(request)
    return request.app.state.db


# Hey future me, one session per request! session_scope() commits when the endpoint returns
# normally and rolls back if it raises. Endpoints never call commit() themselves.
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session from app state."""
    db = get_db(request)
    async with db.session_scope() as session:
        yield session


async def get_app_settings_service(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> AppSettingsService:
    """AppSettingsService with the env settings as fallback for unset keys."""
    return AppSettingsService(session, fallback_settings=settings)


# The scanner is app-scoped (NOT per request) so POST /library/scan/cancel reaches the running scan.
# It opens its own per-artist transactions, so it never shares the request session.
def get_library_scanner_service(request: Request) -> LibraryScannerService:
    _require_db_ready(request)
    return request.app.state.library_scanner


def get_scan_lock(request: Request) -> asyncio.Lock:
    return request.app.state.scan_lock
