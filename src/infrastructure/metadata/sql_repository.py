"""Relational metadata store backed by SQLAlchemy's async engine."""

import time
from typing import Any

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    MetaData,
    String,
    Table,
    delete,
    func,
    insert,
    select,
    text,
)
from sqlalchemy.engine import RowMapping
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.commons.infrastructure.blob.base import HealthStatus
from src.domain.models.video import VideoRecord
from src.infrastructure.metadata.base import VideoRepositoryBase


def build_videos_table(metadata: MetaData, name: str = "videos") -> Table:
    """Describe the videos table.

    Column names match the schema already deployed for the service, so
    the model's ``storage_key`` lives in ``s3_key`` and so on.
    """
    return Table(
        name,
        metadata,
        Column("id", String(36), primary_key=True),
        Column("s3_key", String(1024), nullable=False, unique=True),
        Column("original_name", String(1024), nullable=False),
        Column("mime", String(255), nullable=False),
        Column("size", BigInteger, nullable=False),
        Column("owner_sub", String(255), nullable=True),
        Column(
            "uploaded_at",
            DateTime(timezone=True),
            nullable=False,
            server_default=func.now(),
            index=True,
        ),
    )


class SqlVideoRepository(VideoRepositoryBase):
    """Video metadata in a relational table.

    PostgreSQL (asyncpg) in deployments; any async SQLAlchemy dialect
    works, which the tests rely on with aiosqlite.
    """

    def __init__(self, engine: AsyncEngine, table_name: str = "videos") -> None:
        """Initialize repository.

        Args:
            engine: Async SQLAlchemy engine.
            table_name: Name of the videos table.
        """
        self._engine = engine
        self._metadata = MetaData()
        self._table = build_videos_table(self._metadata, table_name)

    @classmethod
    def from_url(
        cls,
        url: str,
        table_name: str = "videos",
        echo: bool = False,
    ) -> "SqlVideoRepository":
        """Create a repository with its own engine for a database URL."""
        engine = create_async_engine(url, echo=echo, pool_pre_ping=True)
        return cls(engine, table_name=table_name)

    def _to_record(self, row: RowMapping) -> VideoRecord:
        return VideoRecord(
            id=row["id"],
            storage_key=row["s3_key"],
            original_name=row["original_name"],
            mime_type=row["mime"],
            size_bytes=row["size"],
            owner_id=row["owner_sub"],
            uploaded_at=row["uploaded_at"],
        )

    async def ensure_schema(self) -> None:
        """Create the videos table if missing."""
        async with self._engine.begin() as conn:
            await conn.run_sync(self._metadata.create_all)

    async def insert(self, record: VideoRecord) -> VideoRecord:
        """Insert a row, letting the database stamp uploaded_at."""
        values: dict[str, Any] = {
            "id": record.id,
            "s3_key": record.storage_key,
            "original_name": record.original_name,
            "mime": record.mime_type,
            "size": record.size_bytes,
            "owner_sub": record.owner_id,
        }
        if record.uploaded_at is not None:
            values["uploaded_at"] = record.uploaded_at

        stmt = insert(self._table).values(**values).returning(*self._table.c)
        async with self._engine.begin() as conn:
            row = (await conn.execute(stmt)).mappings().one()
        return self._to_record(row)

    async def find_by_id(self, video_id: str) -> VideoRecord | None:
        """Find a row by primary key."""
        stmt = select(self._table).where(self._table.c.id == video_id)
        async with self._engine.connect() as conn:
            row = (await conn.execute(stmt)).mappings().first()
        return self._to_record(row) if row else None

    async def list_all(self) -> list[VideoRecord]:
        """Return all rows, newest upload first."""
        stmt = select(self._table).order_by(self._table.c.uploaded_at.desc())
        async with self._engine.connect() as conn:
            rows = (await conn.execute(stmt)).mappings().all()
        return [self._to_record(row) for row in rows]

    async def delete_by_id(self, video_id: str) -> bool:
        """Delete a row by primary key."""
        stmt = delete(self._table).where(self._table.c.id == video_id)
        async with self._engine.begin() as conn:
            result = await conn.execute(stmt)
        return bool(result.rowcount > 0)

    async def health_check(self) -> HealthStatus:
        """Check service health."""
        start = time.perf_counter()
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            return HealthStatus(
                healthy=False,
                latency_ms=(time.perf_counter() - start) * 1000,
                message=f"Metadata database health check failed: {e}",
                details={"table": self._table.name, "error": str(e)},
            )
        return HealthStatus(
            healthy=True,
            latency_ms=(time.perf_counter() - start) * 1000,
            message="Metadata database is healthy",
            details={"table": self._table.name},
        )

    async def close(self) -> None:
        """Dispose of the engine's connection pool."""
        await self._engine.dispose()
