"""Video metadata store on top of the document database provider."""

from datetime import UTC, datetime

from src.commons.infrastructure.blob.base import HealthStatus
from src.commons.infrastructure.documentdb.base import DocumentDBBase
from src.domain.models.video import VideoRecord
from src.infrastructure.metadata.base import VideoRepositoryBase


class DocumentVideoRepository(VideoRepositoryBase):
    """Video metadata as documents in one collection (MongoDB)."""

    def __init__(self, document_db: DocumentDBBase, collection: str = "videos") -> None:
        self._db = document_db
        self._collection = collection

    async def ensure_schema(self) -> None:
        """Create the unique storage_key index and the listing index."""
        await self._db.create_index(
            self._collection,
            [("storage_key", 1)],
            unique=True,
            name="storage_key_unique",
        )
        await self._db.create_index(
            self._collection,
            [("uploaded_at", -1)],
            name="uploaded_at_desc",
        )

    async def insert(self, record: VideoRecord) -> VideoRecord:
        """Stamp uploaded_at at insert time and store the document."""
        stored = record
        if stored.uploaded_at is None:
            stored = record.model_copy(update={"uploaded_at": datetime.now(UTC)})
        await self._db.insert(self._collection, stored.model_dump())
        return stored

    async def find_by_id(self, video_id: str) -> VideoRecord | None:
        doc = await self._db.find_by_id(self._collection, video_id)
        return VideoRecord.model_validate(doc) if doc else None

    async def list_all(self) -> list[VideoRecord]:
        docs = await self._db.find(
            self._collection,
            {},
            sort=[("uploaded_at", -1)],
        )
        return [VideoRecord.model_validate(doc) for doc in docs]

    async def delete_by_id(self, video_id: str) -> bool:
        return await self._db.delete(self._collection, video_id)

    async def health_check(self) -> HealthStatus:
        return await self._db.health_check()
