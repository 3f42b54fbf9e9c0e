"""Read-only access to stored video records."""

from src.application.services.storage import VideoStorageService
from src.domain.exceptions import VideoNotFoundException
from src.domain.models.video import VideoRecord


class VideoCatalogService:
    """Listing and lookup of video records."""

    def __init__(self, storage: VideoStorageService) -> None:
        self._storage = storage

    async def list_videos(self) -> list[VideoRecord]:
        """Return all records, most recently uploaded first."""
        return await self._storage.list_records()

    async def get_video(self, video_id: str) -> VideoRecord:
        """Return one record.

        Raises:
            VideoNotFoundException: If no record has this id.
        """
        record = await self._storage.get_record(video_id)
        if record is None:
            raise VideoNotFoundException(video_id)
        return record
