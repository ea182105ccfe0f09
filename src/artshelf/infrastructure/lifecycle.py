"""Application lifecycle management for startup and shutdown tasks.

This module handles the FastAPI lifespan context manager:
- Logging configuration
- SQLite directory validation
- Database connectivity check (SELECT 1)
- Schema creation and settings defaults (only when the DB answered)
- Library scanner service wiring
"""

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from artshelf.application.services.app_settings_service import AppSettingsService
from artshelf.application.services.library_scanner_service import LibraryScannerService
from artshelf.config import Settings, get_settings
from artshelf.domain.exceptions import ConfigurationError, DatabaseUnreachableError
from artshelf.infrastructure.observability import configure_logging
from artshelf.infrastructure.persistence import Database

logger = logging.getLogger(__name__)


# Hey future me, SQLite won't create missing parent directories for the .db file and the error
# it gives is cryptic ("unable to open database file"). Create them here, before the engine.
# Only runs for SQLite URLs.
def _ensure_sqlite_directory(settings: Settings) -> None:
    """Create the parent directory of the SQLite database file if needed."""
    db_path = settings.get_sqlite_db_path()
    if db_path is None:
        return

    try:
        if db_path.parent and str(db_path.parent) != ".":
            db_path.parent.mkdir(parents=True, exist_ok=True)
            logger.debug("Ensured SQLite parent directory exists: %s", db_path.parent)
    except OSError as exc:
        raise ConfigurationError(
            f"Unable to create SQLite database directory '{db_path.parent}': {exc}. "
            "Update ARTSHELF_DATABASE__URL or adjust directory permissions."
        ) from exc


async def bootstrap_database(db: Database, settings: Settings) -> bool:
    """Check connectivity, then create tables and copy settings defaults.

    Returns:
        True if the database answered and was bootstrapped, False otherwise.
        There is NO retry - a dead DB at startup is logged and the app keeps running
        so health endpoints can still report it.
    """
    try:
        await db.check_connection()
    except DatabaseUnreachableError as e:
        logger.error("%s - skipping table creation and settings defaults", e.message)
        return False

    await db.create_tables()
    async with db.session_scope() as session:
        await AppSettingsService(session, settings).init_defaults()
    logger.info("Database ready: %s", settings.database.url)
    return True


# Listen future me, everything before `yield` runs at STARTUP, everything after at SHUTDOWN.
# Resources live on app.state so routes (via api/dependencies.py) can reach them. Tests put
# their own Settings on app.state.settings before the app starts, otherwise env settings win.
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = getattr(app.state, "settings", None) or get_settings()
    app.state.settings = settings

    configure_logging(
        log_level=settings.log_level,
        json_format=settings.observability.log_json_format,
        app_name=settings.app_name,
    )
    logger.info("Starting application: %s", settings.app_name)

    db: Database | None = None
    try:
        _ensure_sqlite_directory(settings)

        db = Database(settings)
        app.state.db = db
        app.state.db_ready = await bootstrap_database(db, settings)

        app.state.library_scanner = LibraryScannerService(db, settings)
        # One scan at a time - a second POST while scanning gets a 409
        app.state.scan_lock = asyncio.Lock()

        yield
    finally:
        logger.info("Shutting down application: %s", settings.app_name)
        scanner = getattr(app.state, "library_scanner", None)
        if scanner is not None:
            scanner.cancel()
        if db is not None:
            try:
                await db.close()
                logger.info("Database connection closed")
            except Exception as e:
                logger.exception("Error closing database: %s", e)
