"""Video storage service for managing objects and metadata."""

from pathlib import Path
from urllib.parse import quote

from src.commons.infrastructure.blob.base import BlobMetadata, BlobStorageBase
from src.commons.settings.models import BlobStorageSettings
from src.commons.telemetry import get_logger
from src.domain.exceptions import (
    MetadataException,
    StorageException,
)
from src.domain.models.video import StorageKeys, VideoRecord
from src.infrastructure.metadata.base import VideoRepositoryBase

ORIGINAL_NAME_METADATA = "original-name"


class VideoStorageService:
    """Single entry point to the object store and the metadata store.

    Handles:
    - Object key layout (raw and processed namespaces)
    - Object upload, delete, existence checks and URL signing
    - Video record CRUD operations

    Backend errors are translated into domain exceptions here so the
    pipeline services only ever see ``StorageException`` or
    ``MetadataException``.
    """

    def __init__(
        self,
        blob_storage: BlobStorageBase,
        repository: VideoRepositoryBase,
        blob_settings: BlobStorageSettings,
    ) -> None:
        """Initialize storage service.

        Args:
            blob_storage: Object store provider.
            repository: Video metadata store.
            blob_settings: Object store configuration.
        """
        self._blob = blob_storage
        self._repository = repository
        self._logger = get_logger(__name__)

        self._bucket = blob_settings.bucket
        self._raw_prefix = blob_settings.raw_prefix.strip("/")
        self._processed_prefix = blob_settings.processed_prefix.strip("/")
        self._presigned_expiry = blob_settings.presigned_url_expiry_seconds

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def presigned_expiry_seconds(self) -> int:
        return self._presigned_expiry

    def keys_for(self, video_id: str, filename: str) -> StorageKeys:
        """Object keys for a new video's raw and processed artifacts."""
        return StorageKeys.for_video(
            video_id,
            filename,
            raw_prefix=self._raw_prefix,
            processed_prefix=self._processed_prefix,
        )

    def is_raw_key(self, value: str) -> bool:
        """Whether a value names an object in the raw namespace."""
        return value.startswith(f"{self._raw_prefix}/")

    # =========================================================================
    # Bucket management
    # =========================================================================

    async def ensure_bucket(self) -> None:
        """Create the videos bucket if it does not exist yet."""
        try:
            if not await self._blob.bucket_exists(self._bucket):
                await self._blob.create_bucket(self._bucket)
                self._logger.info("Created bucket", extra={"bucket": self._bucket})
        except Exception as e:
            raise StorageException("create_bucket", self._bucket, str(e)) from e

    # =========================================================================
    # Object operations
    # =========================================================================

    async def upload_file(
        self,
        key: str,
        path: Path,
        content_type: str,
        original_name: str | None = None,
    ) -> BlobMetadata:
        """Upload a local file to the given key.

        Args:
            key: Destination key within the videos bucket.
            path: Local file to read.
            content_type: MIME type stored with the object.
            original_name: Client file name, attached as object metadata.

        Returns:
            Metadata of the stored object.

        Raises:
            StorageException: If the file cannot be read or the upload fails.
        """
        metadata = None
        if original_name:
            metadata = {ORIGINAL_NAME_METADATA: quote(original_name, safe="")}
        self._logger.debug(
            "Uploading object",
            extra={"key": key, "content_type": content_type},
        )
        try:
            with path.open("rb") as data:
                stored = await self._blob.upload(
                    self._bucket,
                    key,
                    data,
                    content_type=content_type,
                    metadata=metadata,
                )
        except Exception as e:
            raise StorageException("upload", key, str(e)) from e
        self._logger.debug(
            "Object uploaded",
            extra={"key": key, "size_bytes": stored.size_bytes},
        )
        return stored

    async def delete_object(self, key: str) -> bool:
        """Delete an object.

        Returns:
            True if deleted, False if it was already gone.

        Raises:
            StorageException: If the store rejects the delete.
        """
        try:
            return await self._blob.delete(self._bucket, key)
        except Exception as e:
            raise StorageException("delete", key, str(e)) from e

    async def object_exists(self, key: str) -> bool:
        try:
            return await self._blob.exists(self._bucket, key)
        except Exception as e:
            raise StorageException("stat", key, str(e)) from e

    async def presign(self, key: str, expiry_seconds: int | None = None) -> str:
        """Sign a GET URL for an object.

        Raises:
            StorageException: If signing fails.
        """
        expiry = self._presigned_expiry if expiry_seconds is None else expiry_seconds
        try:
            return await self._blob.generate_presigned_url(
                self._bucket,
                key,
                expiry_seconds=expiry,
            )
        except Exception as e:
            raise StorageException("presign", key, str(e)) from e

    # =========================================================================
    # Video record operations
    # =========================================================================

    async def save_record(self, record: VideoRecord) -> VideoRecord:
        """Insert a video record.

        Raises:
            MetadataException: If the insert fails.
        """
        self._logger.debug(
            "Saving video record",
            extra={"video_id": record.id, "storage_key": record.storage_key},
        )
        try:
            stored = await self._repository.insert(record)
        except Exception as e:
            raise MetadataException("insert", str(e)) from e
        self._logger.info("Video record saved", extra={"video_id": stored.id})
        return stored

    async def get_record(self, video_id: str) -> VideoRecord | None:
        try:
            return await self._repository.find_by_id(video_id)
        except Exception as e:
            raise MetadataException("find", str(e)) from e

    async def list_records(self) -> list[VideoRecord]:
        try:
            return await self._repository.list_all()
        except Exception as e:
            raise MetadataException("list", str(e)) from e

    async def delete_record(self, video_id: str) -> bool:
        """Delete a video record.

        Returns:
            True if deleted, False if not found.

        Raises:
            MetadataException: If the delete fails.
        """
        try:
            return await self._repository.delete_by_id(video_id)
        except Exception as e:
            raise MetadataException("delete", str(e)) from e
