"""Video metadata store implementations."""

from src.infrastructure.metadata.base import VideoRepositoryBase
from src.infrastructure.metadata.document_repository import DocumentVideoRepository
from src.infrastructure.metadata.sql_repository import (
    SqlVideoRepository,
    build_videos_table,
)

__all__ = [
    # Base classes
    "VideoRepositoryBase",
    # Implementations
    "DocumentVideoRepository",
    "SqlVideoRepository",
    "build_videos_table",
]
