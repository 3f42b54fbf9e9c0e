"""Application services for video ingestion and management."""

from src.application.services.access import VideoAccessService
from src.application.services.catalog import VideoCatalogService
from src.application.services.deletion import VideoDeletionService
from src.application.services.ingestion import VideoIngestionService
from src.application.services.storage import VideoStorageService

__all__ = [
    "VideoAccessService",
    "VideoCatalogService",
    "VideoDeletionService",
    "VideoIngestionService",
    "VideoStorageService",
]
