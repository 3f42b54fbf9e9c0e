"""Time-limited read access to stored videos."""

from datetime import UTC, datetime, timedelta

from src.application.dtos.access import AccessGrant
from src.application.services.storage import VideoStorageService
from src.commons.telemetry import get_logger
from src.domain.exceptions import ObjectNotFoundException, VideoNotFoundException


class VideoAccessService:
    """Issues pre-signed GET URLs for processed and raw videos."""

    def __init__(self, storage: VideoStorageService) -> None:
        self._storage = storage
        self._logger = get_logger(__name__)

    async def issue_access_url(self, id_or_key: str) -> AccessGrant:
        """Sign a read URL for a video record or a raw object key.

        A value inside the raw namespace (``raw/...``) is treated as an
        object key; anything else is looked up as a record id and the
        record's processed object is signed.

        Args:
            id_or_key: Record id or raw object key.

        Returns:
            URL valid for the configured expiry.

        Raises:
            VideoNotFoundException: If no record has the given id.
            ObjectNotFoundException: If the raw key does not exist.
            StorageException: If signing fails.
        """
        if self._storage.is_raw_key(id_or_key):
            key = id_or_key
            if not await self._storage.object_exists(key):
                raise ObjectNotFoundException(key)
        else:
            record = await self._storage.get_record(id_or_key)
            if record is None:
                raise VideoNotFoundException(id_or_key)
            key = record.storage_key

        expiry = self._storage.presigned_expiry_seconds
        issued_at = datetime.now(UTC)
        url = await self._storage.presign(key, expiry)
        self._logger.debug(
            "Issued access URL",
            extra={"key": key, "expires_in_seconds": expiry},
        )
        return AccessGrant(
            url=url,
            key=key,
            expires_in_seconds=expiry,
            expires_at=issued_at + timedelta(seconds=expiry),
        )
