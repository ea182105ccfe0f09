"""Configuration module for artshelf."""

from .settings import (
    DatabaseSettings,
    ObservabilitySettings,
    ScannerSettings,
    Settings,
    StorageSettings,
    get_settings,
)

__all__ = [
    "DatabaseSettings",
    "ObservabilitySettings",
    "ScannerSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
]
