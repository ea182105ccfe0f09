"""Database-backed runtime settings (scan path and friends)."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from artshelf.config import Settings
from artshelf.domain.exceptions import ValidationException
from artshelf.infrastructure.persistence.repositories import AppSettingsRepository

logger = logging.getLogger(__name__)

SCAN_PATH_KEY = "scanPath"


class AppSettingsService:
    """Read and write settings stored in the ``app_settings`` table.

    Hey future me - DB value ALWAYS wins over the env fallback! The env value
    (ARTSHELF_STORAGE__SCAN_PATH) only exists so a fresh container can be pointed at a
    library without touching the UI. Only blank values are rejected here. A path that does
    not exist is reported by the scanner at scan time, not rejected at set time.
    """

    def __init__(
        self,
        session: AsyncSession,
        fallback_settings: Settings | None = None,
    ) -> None:
        """Initialize service.

        Args:
            session: Database session (caller commits)
            fallback_settings: Env settings used when a key is not in the DB
        """
        self._repo = AppSettingsRepository(session)
        self._fallback = fallback_settings

    async def get(self, key: str) -> str | None:
        return await self._repo.get(key)

    async def set(self, key: str, value: str, value_type: str = "string") -> None:
        await self._repo.upsert(key, value, value_type)

    async def get_all(self) -> dict[str, str]:
        return await self._repo.list_all()

    async def get_scan_path(self) -> str | None:
        """Get the configured scan path (DB first, env fallback, else None)."""
        db_value = await self._repo.get(SCAN_PATH_KEY)
        if db_value:
            return db_value
        if self._fallback and self._fallback.storage.scan_path:
            return self._fallback.storage.scan_path
        return None

    async def set_scan_path(self, value: str) -> str:
        """Store the scan path (upsert, last write wins).

        Returns:
            The stored value (surrounding whitespace stripped)

        Raises:
            ValidationException: If the value is blank
        """
        value = value.strip()
        if not value:
            raise ValidationException("Scan path must not be blank")
        await self._repo.upsert(SCAN_PATH_KEY, value, "string")
        logger.info("Scan path set to: %s", value)
        return value

    async def init_defaults(self) -> None:
        """Copy the env scan path into the DB when the DB has none yet."""
        if not self._fallback or not self._fallback.storage.scan_path:
            return
        if await self._repo.get(SCAN_PATH_KEY):
            return
        await self._repo.upsert(SCAN_PATH_KEY, self._fallback.storage.scan_path)
        logger.info(
            "Migrated scan path from environment: %s",
            self._fallback.storage.scan_path,
        )
