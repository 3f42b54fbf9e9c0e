"""Unit tests for the VideoRecord model and key derivation."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from src.domain.models.video import (
    PROCESSED_CONTENT_TYPE,
    StorageKeys,
    VideoRecord,
    new_video_id,
    source_extension,
)


class TestVideoRecord:
    """Tests for VideoRecord model."""

    @pytest.fixture
    def sample_record(self) -> VideoRecord:
        return VideoRecord(
            storage_key="processed/abc.mp4",
            original_name="holiday.mov",
            size_bytes=1024,
            owner_id="user-1",
        )

    def test_defaults(self, sample_record):
        assert len(sample_record.id) == 36
        assert sample_record.mime_type == PROCESSED_CONTENT_TYPE
        assert sample_record.uploaded_at is None

    def test_ids_are_unique(self):
        a = VideoRecord(storage_key="k1", original_name="a.mp4", size_bytes=1)
        b = VideoRecord(storage_key="k2", original_name="b.mp4", size_bytes=1)
        assert a.id != b.id

    def test_empty_storage_key_rejected(self):
        with pytest.raises(ValidationError):
            VideoRecord(storage_key="", original_name="a.mp4", size_bytes=1)

    def test_negative_size_rejected(self):
        with pytest.raises(ValidationError):
            VideoRecord(storage_key="k", original_name="a.mp4", size_bytes=-1)

    def test_naive_uploaded_at_becomes_utc(self):
        record = VideoRecord(
            storage_key="k",
            original_name="a.mp4",
            size_bytes=1,
            uploaded_at=datetime(2024, 5, 1, 12, 0, 0),
        )
        assert record.uploaded_at == datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)
        assert record.uploaded_at.tzinfo is UTC

    def test_aware_uploaded_at_kept(self):
        stamp = datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)
        record = VideoRecord(
            storage_key="k", original_name="a.mp4", size_bytes=1, uploaded_at=stamp
        )
        assert record.uploaded_at is stamp


class TestSourceExtension:
    """Tests for extension extraction from client filenames."""

    @pytest.mark.parametrize(
        ("filename", "expected"),
        [
            ("clip.MOV", ".mov"),
            ("archive.tar.webm", ".webm"),
            ("no_extension", ".mp4"),
            ("../../etc/passwd.mkv", ".mkv"),
            ("C:\\Users\\me\\video.AVI", ".avi"),
            ("weird.$(rm -rf)", ".mp4"),
            ("trailing.", ".mp4"),
        ],
    )
    def test_extension(self, filename, expected):
        assert source_extension(filename) == expected


class TestStorageKeys:
    """Tests for object key derivation."""

    def test_keys_derive_from_id(self):
        keys = StorageKeys.for_video("abc", "My Holiday.MOV")
        assert keys.raw == "raw/abc.mov"
        assert keys.processed == "processed/abc.mp4"

    def test_custom_prefixes(self):
        keys = StorageKeys.for_video(
            "abc", "clip.mp4", raw_prefix="in", processed_prefix="out"
        )
        assert keys.raw == "in/abc.mp4"
        assert keys.processed == "out/abc.mp4"

    def test_same_filename_different_ids_never_collide(self):
        first = StorageKeys.for_video(new_video_id(), "clip.mp4")
        second = StorageKeys.for_video(new_video_id(), "clip.mp4")
        assert first.raw != second.raw
        assert first.processed != second.processed
