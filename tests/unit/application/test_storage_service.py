"""Unit tests for VideoStorageService."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from src.application.services.storage import VideoStorageService
from src.commons.infrastructure.blob.base import BlobMetadata
from src.commons.settings.models import BlobStorageSettings
from src.domain.exceptions import MetadataException, StorageException
from src.domain.models.video import VideoRecord


@pytest.fixture
def mock_blob():
    blob = AsyncMock()
    blob.upload.return_value = BlobMetadata(
        path="raw/a.mp4",
        size_bytes=3,
        content_type="video/mp4",
        created_at=datetime.now(UTC),
        etag="e",
    )
    return blob


@pytest.fixture
def mock_repository():
    return AsyncMock()


@pytest.fixture
def storage(mock_blob, mock_repository) -> VideoStorageService:
    settings = BlobStorageSettings(
        bucket="media", raw_prefix="/uploads/", processed_prefix="encoded"
    )
    return VideoStorageService(mock_blob, mock_repository, settings)


class TestKeys:
    """Tests for key layout."""

    def test_keys_for_uses_configured_prefixes(self, storage):
        keys = storage.keys_for("abc", "Clip.MKV")
        assert keys.raw == "uploads/abc.mkv"
        assert keys.processed == "encoded/abc.mp4"

    def test_is_raw_key(self, storage):
        assert storage.is_raw_key("uploads/abc.mkv")
        assert not storage.is_raw_key("encoded/abc.mp4")
        assert not storage.is_raw_key("uploadsabc")


class TestObjects:
    """Tests for object operations."""

    async def test_upload_file(self, storage, mock_blob, tmp_path):
        path = tmp_path / "a.mp4"
        path.write_bytes(b"abc")

        await storage.upload_file(
            "uploads/a.mp4", path, "video/mp4", original_name="a b.mp4"
        )

        args = mock_blob.upload.call_args
        assert args.args[:2] == ("media", "uploads/a.mp4")
        assert args.kwargs["content_type"] == "video/mp4"
        assert args.kwargs["metadata"] == {"original-name": "a%20b.mp4"}

    async def test_upload_file_without_name(self, storage, mock_blob, tmp_path):
        path = tmp_path / "a.mp4"
        path.write_bytes(b"abc")

        await storage.upload_file("encoded/a.mp4", path, "video/mp4")

        assert mock_blob.upload.call_args.kwargs["metadata"] is None

    async def test_upload_missing_file(self, storage, tmp_path):
        with pytest.raises(StorageException) as exc_info:
            await storage.upload_file("k", tmp_path / "gone.mp4", "video/mp4")
        assert exc_info.value.key == "k"

    async def test_upload_failure_translated(self, storage, mock_blob, tmp_path):
        path = tmp_path / "a.mp4"
        path.write_bytes(b"abc")
        mock_blob.upload.side_effect = ConnectionError("refused")

        with pytest.raises(StorageException, match="refused"):
            await storage.upload_file("k", path, "video/mp4")

    async def test_delete_object(self, storage, mock_blob):
        mock_blob.delete.return_value = False
        assert await storage.delete_object("encoded/a.mp4") is False
        mock_blob.delete.assert_awaited_once_with("media", "encoded/a.mp4")

    async def test_delete_object_failure(self, storage, mock_blob):
        mock_blob.delete.side_effect = PermissionError("denied")
        with pytest.raises(StorageException) as exc_info:
            await storage.delete_object("encoded/a.mp4")
        assert exc_info.value.operation == "delete"

    async def test_object_exists_failure(self, storage, mock_blob):
        mock_blob.exists.side_effect = ConnectionError("refused")
        with pytest.raises(StorageException):
            await storage.object_exists("uploads/a.mp4")

    async def test_ensure_bucket_creates_missing(self, storage, mock_blob):
        mock_blob.bucket_exists.return_value = False
        await storage.ensure_bucket()
        mock_blob.create_bucket.assert_awaited_once_with("media")

    async def test_ensure_bucket_existing(self, storage, mock_blob):
        mock_blob.bucket_exists.return_value = True
        await storage.ensure_bucket()
        mock_blob.create_bucket.assert_not_called()

    async def test_presign_default_expiry(self, storage, mock_blob):
        await storage.presign("encoded/a.mp4")
        assert mock_blob.generate_presigned_url.call_args.kwargs == {
            "expiry_seconds": 3600
        }

    async def test_presign_explicit_zero_expiry_is_passed_through(
        self, storage, mock_blob
    ):
        await storage.presign("encoded/a.mp4", expiry_seconds=0)
        assert mock_blob.generate_presigned_url.call_args.kwargs == {
            "expiry_seconds": 0
        }


class TestRecords:
    """Tests for record operations."""

    async def test_save_record(self, storage, mock_repository):
        record = VideoRecord(storage_key="encoded/a.mp4", original_name="a", size_bytes=1)
        mock_repository.insert.return_value = record

        assert await storage.save_record(record) is record

    @pytest.mark.parametrize(
        ("method", "repo_method", "args"),
        [
            ("get_record", "find_by_id", ("a",)),
            ("list_records", "list_all", ()),
            ("delete_record", "delete_by_id", ("a",)),
        ],
    )
    async def test_repository_errors_translated(
        self, storage, mock_repository, method, repo_method, args
    ):
        getattr(mock_repository, repo_method).side_effect = OSError("db down")

        with pytest.raises(MetadataException, match="db down"):
            await getattr(storage, method)(*args)

    async def test_save_record_failure(self, storage, mock_repository):
        mock_repository.insert.side_effect = RuntimeError("duplicate key")
        record = VideoRecord(storage_key="encoded/a.mp4", original_name="a", size_bytes=1)

        with pytest.raises(MetadataException) as exc_info:
            await storage.save_record(record)

        assert exc_info.value.operation == "insert"
