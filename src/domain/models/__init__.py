"""Domain models."""

from src.domain.models.video import (
    PROCESSED_CONTENT_TYPE,
    PROCESSED_EXTENSION,
    StorageKeys,
    VideoRecord,
    new_video_id,
    source_extension,
)

__all__ = [
    "PROCESSED_CONTENT_TYPE",
    "PROCESSED_EXTENSION",
    "StorageKeys",
    "VideoRecord",
    "new_video_id",
    "source_extension",
]
