"""Abstract base class for object store operations."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO


@dataclass
class BlobMetadata:
    """Metadata for a stored blob."""

    path: str
    size_bytes: int
    content_type: str
    created_at: datetime
    etag: str


@dataclass
class HealthStatus:
    """Health check result."""

    healthy: bool
    latency_ms: float
    message: str | None = None
    details: dict[str, str] | None = None


class BlobStorageBase(ABC):
    """Abstract base class for object store operations.

    Implementations should handle:
    - MinIO (local development)
    - AWS S3
    """

    @abstractmethod
    async def upload(
        self,
        bucket: str,
        path: str,
        data: BinaryIO | bytes,
        content_type: str = "application/octet-stream",
        metadata: dict[str, str] | None = None,
    ) -> BlobMetadata:
        """Upload a blob, overwriting any object at the same path.

        Args:
            bucket: Target bucket name.
            path: Key within the bucket.
            data: Seekable file-like object or bytes to upload.
            content_type: MIME type of the content.
            metadata: Optional key-value user metadata.

        Returns:
            Metadata of the uploaded blob.
        """

    @abstractmethod
    async def download(self, bucket: str, path: str) -> bytes:
        """Download a blob.

        Raises:
            BlobNotFoundError: If blob doesn't exist.
        """

    @abstractmethod
    async def delete(self, bucket: str, path: str) -> bool:
        """Delete a blob.

        Returns:
            True if deleted, False if it didn't exist.
        """

    @abstractmethod
    async def exists(self, bucket: str, path: str) -> bool:
        """Check if a blob exists."""

    @abstractmethod
    async def get_metadata(self, bucket: str, path: str) -> BlobMetadata:
        """Get blob metadata without downloading.

        Raises:
            BlobNotFoundError: If blob doesn't exist.
        """

    @abstractmethod
    async def generate_presigned_url(
        self,
        bucket: str,
        path: str,
        expiry_seconds: int = 3600,
    ) -> str:
        """Generate a time-limited signed GET URL for one object.

        Args:
            bucket: Bucket name.
            path: Key within the bucket.
            expiry_seconds: URL validity duration from now.

        Returns:
            Presigned URL string.
        """

    @abstractmethod
    async def create_bucket(self, bucket: str) -> bool:
        """Create a bucket.

        Returns:
            True if created, False if it already existed.
        """

    @abstractmethod
    async def bucket_exists(self, bucket: str) -> bool:
        """Check if a bucket exists."""

    @abstractmethod
    async def health_check(self) -> HealthStatus:
        """Check service health."""
