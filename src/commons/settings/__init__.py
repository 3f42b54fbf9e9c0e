"""Settings management module."""

from src.commons.settings.loader import SettingsLoader, get_settings, reset_settings
from src.commons.settings.models import (
    AppSettings,
    AuthSettings,
    BlobStorageSettings,
    MetadataDBSettings,
    ServerSettings,
    Settings,
    StagingSettings,
    TelemetrySettings,
    TranscodingSettings,
    UploadSettings,
)

__all__ = [
    # Loader
    "SettingsLoader",
    "get_settings",
    "reset_settings",
    # Main settings
    "Settings",
    "AppSettings",
    "ServerSettings",
    # Storage
    "BlobStorageSettings",
    "MetadataDBSettings",
    "StagingSettings",
    # Pipeline
    "UploadSettings",
    "TranscodingSettings",
    # Auth & telemetry
    "AuthSettings",
    "TelemetrySettings",
]
