"""Abstract base class for the video metadata store."""

from abc import ABC, abstractmethod

from src.commons.infrastructure.blob.base import HealthStatus
from src.domain.models.video import VideoRecord


class VideoRepositoryBase(ABC):
    """Source of truth for listing, lookup-by-id and key resolution.

    Implementations should handle:
    - PostgreSQL (relational, via SQLAlchemy)
    - MongoDB (document, via Motor)

    Backend errors propagate unchanged; callers translate them.
    """

    @abstractmethod
    async def ensure_schema(self) -> None:
        """Create the table/indexes backing the store if missing."""

    @abstractmethod
    async def insert(self, record: VideoRecord) -> VideoRecord:
        """Insert a record.

        Args:
            record: Record to persist. ``uploaded_at`` is stamped by the
                store unless already set.

        Returns:
            The stored record, with ``uploaded_at`` populated.
        """

    @abstractmethod
    async def find_by_id(self, video_id: str) -> VideoRecord | None:
        """Find a record by its id.

        Returns:
            Record if found, None otherwise.
        """

    @abstractmethod
    async def list_all(self) -> list[VideoRecord]:
        """Return every record, most recently uploaded first."""

    @abstractmethod
    async def delete_by_id(self, video_id: str) -> bool:
        """Delete a record.

        Returns:
            True if deleted, False if not found.
        """

    @abstractmethod
    async def health_check(self) -> HealthStatus:
        """Check service health."""

    async def close(self) -> None:
        """Release connections held by the store."""
