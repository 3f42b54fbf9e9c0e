"""MinIO implementation of the object store."""

import asyncio
import io
import time
from datetime import UTC, datetime, timedelta
from typing import BinaryIO

from minio import Minio
from minio.error import S3Error

from src.commons.infrastructure.blob.base import (
    BlobMetadata,
    BlobStorageBase,
    HealthStatus,
)

_MISSING_OBJECT_CODES = frozenset({"NoSuchKey", "NoSuchObject", "ResourceNotFound"})


class BlobNotFoundError(Exception):
    """Raised when a blob is not found."""

    def __init__(self, bucket: str, path: str) -> None:
        self.bucket = bucket
        self.path = path
        super().__init__(f"Blob not found: {bucket}/{path}")


def _is_missing(error: S3Error) -> bool:
    return error.code in _MISSING_OBJECT_CODES


class MinioBlobStorage(BlobStorageBase):
    """MinIO implementation of the object store.

    Works with both MinIO (local development) and AWS S3 (production).
    The minio client is blocking, so every call runs in the default
    executor.
    """

    def __init__(
        self,
        endpoint: str,
        access_key: str,
        secret_key: str,
        secure: bool = False,
        region: str | None = None,
    ) -> None:
        """Initialize MinIO client.

        Args:
            endpoint: MinIO/S3 endpoint (e.g., "localhost:9000").
            access_key: Access key ID.
            secret_key: Secret access key.
            secure: Use HTTPS connection.
            region: Bucket region. When set, URL signing needs no
                network round trip.
        """
        self._client = Minio(
            endpoint=endpoint,
            access_key=access_key,
            secret_key=secret_key,
            secure=secure,
            region=region,
        )
        self._endpoint = endpoint

    async def upload(
        self,
        bucket: str,
        path: str,
        data: BinaryIO | bytes,
        content_type: str = "application/octet-stream",
        metadata: dict[str, str] | None = None,
    ) -> BlobMetadata:
        """Upload a blob to storage."""
        loop = asyncio.get_running_loop()

        if isinstance(data, bytes):
            data_io: BinaryIO = io.BytesIO(data)
            length = len(data)
        else:
            data.seek(0, io.SEEK_END)
            length = data.tell()
            data.seek(0)
            data_io = data

        def _upload() -> None:
            self._client.put_object(
                bucket_name=bucket,
                object_name=path,
                data=data_io,
                length=length,
                content_type=content_type,
                metadata=metadata,
            )

        await loop.run_in_executor(None, _upload)
        return await self.get_metadata(bucket, path)

    async def download(self, bucket: str, path: str) -> bytes:
        """Download a blob from storage."""
        loop = asyncio.get_running_loop()

        def _download() -> bytes:
            try:
                response = self._client.get_object(bucket_name=bucket, object_name=path)
            except S3Error as e:
                if _is_missing(e):
                    raise BlobNotFoundError(bucket, path) from e
                raise
            try:
                data: bytes = response.read()
                return data
            finally:
                response.close()
                response.release_conn()

        return await loop.run_in_executor(None, _download)

    async def delete(self, bucket: str, path: str) -> bool:
        """Delete a blob, reporting whether it existed."""
        if not await self.exists(bucket, path):
            return False

        loop = asyncio.get_running_loop()
        await loop.run_in_executor(
            None,
            lambda: self._client.remove_object(bucket_name=bucket, object_name=path),
        )
        return True

    async def exists(self, bucket: str, path: str) -> bool:
        """Check if a blob exists."""
        loop = asyncio.get_running_loop()

        def _stat() -> bool:
            try:
                self._client.stat_object(bucket_name=bucket, object_name=path)
            except S3Error as e:
                if _is_missing(e):
                    return False
                raise
            return True

        return await loop.run_in_executor(None, _stat)

    async def get_metadata(self, bucket: str, path: str) -> BlobMetadata:
        """Get blob metadata without downloading."""
        loop = asyncio.get_running_loop()

        def _stat() -> BlobMetadata:
            try:
                stat = self._client.stat_object(bucket_name=bucket, object_name=path)
            except S3Error as e:
                if _is_missing(e):
                    raise BlobNotFoundError(bucket, path) from e
                raise
            return BlobMetadata(
                path=path,
                size_bytes=stat.size or 0,
                content_type=stat.content_type or "application/octet-stream",
                created_at=stat.last_modified or datetime.now(UTC),
                etag=stat.etag or "",
            )

        return await loop.run_in_executor(None, _stat)

    async def generate_presigned_url(
        self,
        bucket: str,
        path: str,
        expiry_seconds: int = 3600,
    ) -> str:
        """Generate a presigned GET URL for direct access."""
        loop = asyncio.get_running_loop()

        def _presign() -> str:
            url = self._client.presigned_get_object(
                bucket_name=bucket,
                object_name=path,
                expires=timedelta(seconds=expiry_seconds),
            )
            return str(url)

        return await loop.run_in_executor(None, _presign)

    async def create_bucket(self, bucket: str) -> bool:
        """Create a bucket unless it already exists."""
        loop = asyncio.get_running_loop()

        def _create() -> bool:
            if self._client.bucket_exists(bucket_name=bucket):
                return False
            self._client.make_bucket(bucket_name=bucket)
            return True

        return await loop.run_in_executor(None, _create)

    async def bucket_exists(self, bucket: str) -> bool:
        """Check if a bucket exists."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, lambda: self._client.bucket_exists(bucket_name=bucket)
        )

    async def health_check(self) -> HealthStatus:
        """Check service health."""
        start = time.perf_counter()
        try:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self._client.list_buckets)
        except Exception as e:
            return HealthStatus(
                healthy=False,
                latency_ms=(time.perf_counter() - start) * 1000,
                message=f"Object store health check failed: {e}",
                details={"endpoint": self._endpoint, "error": str(e)},
            )
        return HealthStatus(
            healthy=True,
            latency_ms=(time.perf_counter() - start) * 1000,
            message="Object store is healthy",
            details={"endpoint": self._endpoint},
        )
