"""Application layer - use cases and orchestration.

This layer contains:
- Services: Ingestion, deletion, access and listing workflows
- DTOs: Data transfer objects for API boundaries
"""

from src.application.dtos import (
    AccessGrant,
    IngestionProgress,
    IngestVideoRequest,
    ProcessingStep,
)
from src.application.services import (
    VideoAccessService,
    VideoCatalogService,
    VideoDeletionService,
    VideoIngestionService,
    VideoStorageService,
)

__all__ = [
    # DTOs
    "AccessGrant",
    "IngestVideoRequest",
    "IngestionProgress",
    "ProcessingStep",
    # Services
    "VideoAccessService",
    "VideoCatalogService",
    "VideoDeletionService",
    "VideoIngestionService",
    "VideoStorageService",
]
