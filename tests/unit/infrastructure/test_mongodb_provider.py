"""Unit tests for MongoDB document database provider."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest


class _AsyncCursor:
    """Minimal stand-in for a Motor cursor."""

    def __init__(self, documents):
        self._documents = list(documents)
        self.sort = MagicMock(return_value=self)
        self.skip = MagicMock(return_value=self)
        self.limit = MagicMock(return_value=self)

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for doc in self._documents:
            yield doc


class TestMongoDBDocumentDB:
    """Tests for MongoDBDocumentDB provider.

    These tests verify the ID mapping behavior between domain model 'id'
    and MongoDB's '_id' field.
    """

    @pytest.fixture
    def mock_motor_client(self):
        """Create a mock Motor client."""
        with patch(
            "src.commons.infrastructure.documentdb.mongodb_provider.AsyncIOMotorClient"
        ) as mock_client_class:
            mock_client = MagicMock()
            mock_db = MagicMock()
            mock_collection = MagicMock()

            mock_client.__getitem__ = MagicMock(return_value=mock_db)
            mock_db.__getitem__ = MagicMock(return_value=mock_collection)

            mock_client_class.return_value = mock_client

            yield {
                "client_class": mock_client_class,
                "client": mock_client,
                "db": mock_db,
                "collection": mock_collection,
            }

    @pytest.fixture
    def mongodb_provider(self, mock_motor_client):
        """Create MongoDB provider with mocked client."""
        from src.commons.infrastructure.documentdb.mongodb_provider import (
            MongoDBDocumentDB,
        )

        return MongoDBDocumentDB(
            connection_string="mongodb://localhost:27017",
            database_name="test_db",
        )

    # =========================================================================
    # Insert Tests
    # =========================================================================

    async def test_insert_uses_id_as_mongodb_id(
        self, mongodb_provider, mock_motor_client
    ):
        collection = mock_motor_client["collection"]
        collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id="vid-1"))

        document = {"id": "vid-1", "storage_key": "processed/vid-1.mp4"}

        result = await mongodb_provider.insert("videos", document)

        call_args = collection.insert_one.call_args[0][0]
        assert call_args["_id"] == "vid-1"
        assert "id" not in call_args
        assert result == "vid-1"

    async def test_insert_does_not_modify_original_document(
        self, mongodb_provider, mock_motor_client
    ):
        collection = mock_motor_client["collection"]
        collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id="vid-1"))

        original_document = {"id": "vid-1", "storage_key": "k"}

        await mongodb_provider.insert("videos", original_document)

        assert "id" in original_document
        assert "_id" not in original_document

    # =========================================================================
    # Find Tests
    # =========================================================================

    async def test_find_by_id_restores_id(self, mongodb_provider, mock_motor_client):
        collection = mock_motor_client["collection"]
        collection.find_one = AsyncMock(
            return_value={"_id": "vid-1", "storage_key": "processed/vid-1.mp4"}
        )

        result = await mongodb_provider.find_by_id("videos", "vid-1")

        collection.find_one.assert_called_with({"_id": "vid-1"})
        assert result == {"id": "vid-1", "storage_key": "processed/vid-1.mp4"}

    async def test_find_by_id_not_found(self, mongodb_provider, mock_motor_client):
        collection = mock_motor_client["collection"]
        collection.find_one = AsyncMock(return_value=None)

        assert await mongodb_provider.find_by_id("videos", "missing") is None

    async def test_find_applies_sort(self, mongodb_provider, mock_motor_client):
        collection = mock_motor_client["collection"]
        cursor = _AsyncCursor([{"_id": "b"}, {"_id": "a"}])
        collection.find = MagicMock(return_value=cursor)

        result = await mongodb_provider.find(
            "videos", {}, sort=[("uploaded_at", -1)]
        )

        cursor.sort.assert_called_once_with([("uploaded_at", -1)])
        cursor.skip.assert_not_called()
        cursor.limit.assert_not_called()
        assert [doc["id"] for doc in result] == ["b", "a"]

    async def test_find_with_paging(self, mongodb_provider, mock_motor_client):
        collection = mock_motor_client["collection"]
        cursor = _AsyncCursor([])
        collection.find = MagicMock(return_value=cursor)

        await mongodb_provider.find("videos", {"owner_id": "u"}, skip=10, limit=5)

        collection.find.assert_called_once_with({"owner_id": "u"})
        cursor.skip.assert_called_once_with(10)
        cursor.limit.assert_called_once_with(5)

    # =========================================================================
    # Delete / Index / Health Tests
    # =========================================================================

    async def test_delete(self, mongodb_provider, mock_motor_client):
        collection = mock_motor_client["collection"]
        collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))

        assert await mongodb_provider.delete("videos", "vid-1") is True
        collection.delete_one.assert_called_with({"_id": "vid-1"})

    async def test_delete_missing(self, mongodb_provider, mock_motor_client):
        collection = mock_motor_client["collection"]
        collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=0))

        assert await mongodb_provider.delete("videos", "vid-1") is False

    async def test_create_index(self, mongodb_provider, mock_motor_client):
        collection = mock_motor_client["collection"]
        collection.create_index = AsyncMock(return_value="storage_key_unique")

        name = await mongodb_provider.create_index(
            "videos", [("storage_key", 1)], unique=True, name="storage_key_unique"
        )

        assert name == "storage_key_unique"
        collection.create_index.assert_called_once_with(
            [("storage_key", 1)], unique=True, name="storage_key_unique"
        )

    async def test_health_check_healthy(self, mongodb_provider, mock_motor_client):
        mock_motor_client["client"].admin.command = AsyncMock(return_value={"ok": 1})

        status = await mongodb_provider.health_check()

        assert status.healthy is True

    async def test_health_check_unhealthy(self, mongodb_provider, mock_motor_client):
        mock_motor_client["client"].admin.command = AsyncMock(
            side_effect=ConnectionError("refused")
        )

        status = await mongodb_provider.health_check()

        assert status.healthy is False
        assert "refused" in status.message
