"""Unit tests for the SQLAlchemy video repository, run against SQLite."""

from datetime import UTC, datetime

import pytest
from sqlalchemy import MetaData
from sqlalchemy.exc import IntegrityError

from src.domain.models.video import VideoRecord
from src.infrastructure.metadata.sql_repository import (
    SqlVideoRepository,
    build_videos_table,
)


def _record(name: str = "clip.mp4", **overrides) -> VideoRecord:
    record = VideoRecord(
        storage_key="placeholder",
        original_name=name,
        size_bytes=1000,
        owner_id="user-1",
    )
    fields = {"storage_key": f"processed/{record.id}.mp4", **overrides}
    return record.model_copy(update=fields)


@pytest.fixture
async def repository(tmp_path):
    repo = SqlVideoRepository.from_url(f"sqlite+aiosqlite:///{tmp_path / 'videos.db'}")
    await repo.ensure_schema()
    yield repo
    await repo.close()


class TestSchema:
    """Tests for the table definition."""

    def test_column_names(self):
        table = build_videos_table(MetaData())
        assert [c.name for c in table.columns] == [
            "id",
            "s3_key",
            "original_name",
            "mime",
            "size",
            "owner_sub",
            "uploaded_at",
        ]
        assert table.c.id.primary_key
        assert table.c.s3_key.unique
        assert table.c.owner_sub.nullable
        assert table.c.uploaded_at.server_default is not None

    def test_custom_table_name(self):
        assert build_videos_table(MetaData(), "clips").name == "clips"

    async def test_ensure_schema_is_idempotent(self, repository):
        await repository.ensure_schema()


class TestInsert:
    """Tests for inserting rows."""

    async def test_insert_stamps_uploaded_at(self, repository):
        record = _record()

        stored = await repository.insert(record)

        assert stored.id == record.id
        assert stored.storage_key == record.storage_key
        assert stored.owner_id == "user-1"
        assert stored.uploaded_at is not None
        assert stored.uploaded_at.tzinfo is not None

    async def test_insert_keeps_explicit_uploaded_at(self, repository):
        stamp = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)
        stored = await repository.insert(_record(uploaded_at=stamp))
        assert stored.uploaded_at == stamp

    async def test_insert_without_owner(self, repository):
        stored = await repository.insert(_record(owner_id=None))
        assert stored.owner_id is None

    async def test_duplicate_id_rejected(self, repository):
        record = _record()
        await repository.insert(record)

        duplicate = record.model_copy(update={"storage_key": "processed/other.mp4"})
        with pytest.raises(IntegrityError):
            await repository.insert(duplicate)

    async def test_duplicate_storage_key_rejected(self, repository):
        first = await repository.insert(_record())

        with pytest.raises(IntegrityError):
            await repository.insert(_record(storage_key=first.storage_key))


class TestQueries:
    """Tests for lookup and listing."""

    async def test_find_by_id(self, repository):
        stored = await repository.insert(_record("holiday.mov"))

        found = await repository.find_by_id(stored.id)

        assert found == stored

    async def test_find_by_id_missing(self, repository):
        assert await repository.find_by_id("does-not-exist") is None

    async def test_list_all_newest_first(self, repository):
        older = await repository.insert(
            _record("old.mp4", uploaded_at=datetime(2024, 1, 1, tzinfo=UTC))
        )
        newer = await repository.insert(
            _record("new.mp4", uploaded_at=datetime(2024, 6, 1, tzinfo=UTC))
        )
        middle = await repository.insert(
            _record("mid.mp4", uploaded_at=datetime(2024, 3, 1, tzinfo=UTC))
        )

        listed = await repository.list_all()

        assert [r.id for r in listed] == [newer.id, middle.id, older.id]

    async def test_list_all_empty(self, repository):
        assert await repository.list_all() == []


class TestDelete:
    """Tests for deleting rows."""

    async def test_delete_by_id(self, repository):
        stored = await repository.insert(_record())

        assert await repository.delete_by_id(stored.id) is True
        assert await repository.find_by_id(stored.id) is None
        assert await repository.delete_by_id(stored.id) is False


class TestHealth:
    """Tests for health checks."""

    async def test_healthy(self, repository):
        status = await repository.health_check()
        assert status.healthy is True
        assert status.details == {"table": "videos"}
