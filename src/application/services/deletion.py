"""Coordinated removal of a video's object and record."""

from src.application.services.storage import VideoStorageService
from src.commons.telemetry import LogContext, get_logger
from src.domain.exceptions import VideoNotFoundException
from src.domain.models.video import VideoRecord


class VideoDeletionService:
    """Deletes a video object first, then its record.

    If the object delete fails the record stays, so a listed video
    always points at an object that still exists.
    """

    def __init__(self, storage: VideoStorageService) -> None:
        self._storage = storage
        self._logger = get_logger(__name__)

    async def delete_video(self, video_id: str) -> VideoRecord:
        """Delete a video.

        Args:
            video_id: Id of the record to remove.

        Returns:
            The record as it was before deletion.

        Raises:
            VideoNotFoundException: If no record has this id, including
                when it disappears between lookup and delete.
            StorageException: If the object delete fails. Nothing is
                removed from the metadata store in that case.
            MetadataException: If the record delete fails.
        """
        with LogContext(video_id=video_id):
            record = await self._storage.get_record(video_id)
            if record is None:
                raise VideoNotFoundException(video_id)

            removed = await self._storage.delete_object(record.storage_key)
            if not removed:
                self._logger.warning(
                    "Object already missing from storage",
                    extra={"storage_key": record.storage_key},
                )

            if not await self._storage.delete_record(video_id):
                raise VideoNotFoundException(video_id)

            self._logger.info(
                "Video deleted",
                extra={"storage_key": record.storage_key},
            )
            return record
