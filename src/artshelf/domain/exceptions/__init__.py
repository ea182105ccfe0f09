"""Domain exceptions."""

from typing import Any


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    # Hey future me, we store message as an attribute so code can inspect it without parsing
    # str(exception). Don't raise this directly - use a specific subclass so callers can catch precisely.
    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


class EntityNotFoundException(DomainException):
    """Raised when an entity is not found."""

    def __init__(self, entity_type: str, entity_id: Any) -> None:
        super().__init__(f"{entity_type} with id {entity_id} not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


class ValidationException(DomainException):
    """Raised when entity validation fails."""

    pass


class ConfigurationError(DomainException):
    """Application misconfiguration.

    Example:
        raise ConfigurationError("Unable to create SQLite database directory")
    """

    pass


# =============================================================================
# Library scan exceptions
# Hey future me - NONE of these should escape run_scan()! The scanner catches them and
# folds them into the ScanSummary so the admin always gets a structured answer back.
# =============================================================================


class ScanPathUnavailableError(DomainException):
    """Scan root is unset, missing, not a directory, or unreadable."""

    def __init__(self, scan_path: str | None, reason: str) -> None:
        super().__init__(f"Scan path unavailable ({scan_path or '<unset>'}): {reason}")
        self.scan_path = scan_path
        self.reason = reason


class ArtistDirectoryUnreadableError(DomainException):
    """One artist directory could not be listed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Artist directory unreadable: {path} ({reason})")
        self.path = path
        self.reason = reason


class PersistenceFailure(DomainException):
    """The transactional batch for a single artist failed and was rolled back."""

    def __init__(self, artist: str, cause: BaseException) -> None:
        super().__init__(f"Failed to reconcile artist '{artist}': {cause}")
        self.artist = artist
        self.cause = cause

    def to_dict(self) -> dict[str, str]:
        """Entry for ScanSummary.failed_artists."""
        return {
            "artist": self.artist,
            "error": str(self.cause),
            "error_type": type(self.cause).__name__,
        }


class DatabaseUnreachableError(DomainException):
    """Database connectivity check failed.

    Raised by Database.check_connection() at startup, and by the API dependencies for
    every request that needs the DB while it is down.
    """

    pass


__all__ = [
    "DomainException",
    "EntityNotFoundException",
    "ValidationException",
    "ConfigurationError",
    "ScanPathUnavailableError",
    "ArtistDirectoryUnreadableError",
    "PersistenceFailure",
    "DatabaseUnreachableError",
]
