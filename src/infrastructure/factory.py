"""Infrastructure factory for creating service instances from configuration."""

from typing import Any, cast

from sqlalchemy.engine import URL

from src.commons.infrastructure.blob import BlobStorageBase, MinioBlobStorage
from src.commons.infrastructure.documentdb import DocumentDBBase, MongoDBDocumentDB
from src.commons.settings.models import Settings
from src.commons.telemetry import get_logger
from src.infrastructure.auth import JWTTokenVerifier
from src.infrastructure.metadata import (
    DocumentVideoRepository,
    SqlVideoRepository,
    VideoRepositoryBase,
)
from src.infrastructure.staging import LocalStagingArea
from src.infrastructure.video import FFmpegTranscoder, TranscoderBase


class InfrastructureFactory:
    """Factory for creating infrastructure service instances.

    Creates concrete implementations based on configuration settings.
    Each instance is created lazily and reused for the process lifetime.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize factory with settings.

        Args:
            settings: Application settings.
        """
        self._settings = settings
        self._instances: dict[str, Any] = {}
        self._logger = get_logger(__name__)

    @property
    def settings(self) -> Settings:
        return self._settings

    def get_blob_storage(self) -> BlobStorageBase:
        """Get object store instance.

        Returns:
            Configured object store provider.
        """
        if "blob_storage" not in self._instances:
            blob_settings = self._settings.blob_storage
            self._instances["blob_storage"] = MinioBlobStorage(
                endpoint=blob_settings.endpoint,
                access_key=blob_settings.access_key,
                secret_key=blob_settings.secret_key,
                secure=blob_settings.use_ssl,
                region=blob_settings.region,
            )
        return cast("BlobStorageBase", self._instances["blob_storage"])

    def get_document_db(self) -> DocumentDBBase:
        """Get document database instance.

        Returns:
            Configured document database provider.
        """
        if "document_db" not in self._instances:
            db_settings = self._settings.metadata_db
            if db_settings.url:
                connection_string = db_settings.url
            elif db_settings.username and db_settings.password:
                connection_string = (
                    f"mongodb://{db_settings.username}:{db_settings.password}"
                    f"@{db_settings.host}:{db_settings.port}"
                    f"/?authSource={db_settings.auth_source}"
                )
            else:
                connection_string = f"mongodb://{db_settings.host}:{db_settings.port}"
            self._instances["document_db"] = MongoDBDocumentDB(
                connection_string=connection_string,
                database_name=db_settings.database,
            )
        return cast("DocumentDBBase", self._instances["document_db"])

    def get_video_repository(self) -> VideoRepositoryBase:
        """Get video metadata store instance.

        Returns:
            Configured metadata store.

        Raises:
            ValueError: If provider is not supported.
        """
        if "video_repository" not in self._instances:
            db_settings = self._settings.metadata_db
            provider = db_settings.provider

            if provider == "postgres":
                self._instances["video_repository"] = SqlVideoRepository.from_url(
                    self.database_url(),
                    table_name=db_settings.table,
                    echo=db_settings.echo,
                )
            elif provider == "mongodb":
                self._instances["video_repository"] = DocumentVideoRepository(
                    self.get_document_db(),
                    collection=db_settings.table,
                )
            else:
                raise ValueError(f"Unsupported metadata provider: {provider}")

        return cast("VideoRepositoryBase", self._instances["video_repository"])

    def database_url(self) -> str:
        """SQLAlchemy URL for the relational metadata store."""
        db_settings = self._settings.metadata_db
        if db_settings.url:
            return db_settings.url
        url = URL.create(
            "postgresql+asyncpg",
            username=db_settings.username or None,
            password=db_settings.password or None,
            host=db_settings.host,
            port=db_settings.port,
            database=db_settings.database,
        )
        return url.render_as_string(hide_password=False)

    def get_transcoder(self) -> TranscoderBase:
        """Get transcoder instance.

        Returns:
            Configured transcoder.
        """
        if "transcoder" not in self._instances:
            trans_settings = self._settings.transcoding
            self._instances["transcoder"] = FFmpegTranscoder(
                ffmpeg_path=trans_settings.ffmpeg_path,
                timeout_seconds=trans_settings.timeout_seconds,
            )
        return cast("TranscoderBase", self._instances["transcoder"])

    def get_staging_area(self) -> LocalStagingArea:
        if "staging" not in self._instances:
            staging_settings = self._settings.staging
            self._instances["staging"] = LocalStagingArea(
                root=staging_settings.directory,
                chunk_size=staging_settings.chunk_size,
            )
        return cast("LocalStagingArea", self._instances["staging"])

    def get_token_verifier(self) -> JWTTokenVerifier:
        if "token_verifier" not in self._instances:
            auth_settings = self._settings.auth
            self._instances["token_verifier"] = JWTTokenVerifier(
                secret=auth_settings.jwt_secret,
                algorithm=auth_settings.algorithm,
                owner_claim=auth_settings.owner_claim,
            )
        return cast("JWTTokenVerifier", self._instances["token_verifier"])

    async def close_all(self) -> None:
        """Close all service connections."""
        for name, instance in self._instances.items():
            if hasattr(instance, "close"):
                try:
                    close_result = instance.close()
                    if hasattr(close_result, "__await__"):
                        await close_result
                except Exception as e:
                    self._logger.warning(
                        "Failed to close service",
                        extra={"service": name, "error": str(e)},
                    )

        self._instances.clear()


class _FactoryHolder:
    """Holder for the factory singleton to avoid global statements."""

    instance: InfrastructureFactory | None = None


def get_factory(settings: Settings | None = None) -> InfrastructureFactory:
    """Get or create the infrastructure factory singleton.

    Args:
        settings: Settings to use. Required on first call.

    Returns:
        Infrastructure factory instance.

    Raises:
        ValueError: If settings not provided on first call.
    """
    if _FactoryHolder.instance is None:
        if settings is None:
            raise ValueError("Settings required to initialize factory")
        _FactoryHolder.instance = InfrastructureFactory(settings)

    return _FactoryHolder.instance


def reset_factory() -> None:
    """Reset the factory singleton (for testing)."""
    _FactoryHolder.instance = None
