"""FastAPI dependency injection for services and settings."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.application.services.access import VideoAccessService
from src.application.services.catalog import VideoCatalogService
from src.application.services.deletion import VideoDeletionService
from src.application.services.ingestion import VideoIngestionService
from src.application.services.storage import VideoStorageService
from src.commons.settings.loader import get_settings as _load_settings
from src.commons.settings.models import Settings
from src.commons.telemetry import get_logger
from src.domain.exceptions import AuthenticationException
from src.infrastructure.factory import (
    InfrastructureFactory,
    get_factory,
    reset_factory,
)

logger = get_logger(__name__)

_bearer = HTTPBearer(auto_error=False)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Application settings loaded from config files and environment.
    """
    return _load_settings()


def get_infrastructure_factory(
    settings: Annotated[Settings, Depends(get_settings)],
) -> InfrastructureFactory:
    """Get infrastructure factory with all providers.

    Args:
        settings: Application settings.

    Returns:
        Configured infrastructure factory.
    """
    return get_factory(settings)


def get_storage_service(
    factory: Annotated[InfrastructureFactory, Depends(get_infrastructure_factory)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> VideoStorageService:
    """Get storage service over the configured object and metadata stores."""
    return VideoStorageService(
        blob_storage=factory.get_blob_storage(),
        repository=factory.get_video_repository(),
        blob_settings=settings.blob_storage,
    )


def get_ingestion_service(
    factory: Annotated[InfrastructureFactory, Depends(get_infrastructure_factory)],
    storage: Annotated[VideoStorageService, Depends(get_storage_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> VideoIngestionService:
    """Get video ingestion service with all dependencies.

    Args:
        factory: Infrastructure factory.
        storage: Storage service.
        settings: Application settings.

    Returns:
        Configured video ingestion service.
    """
    return VideoIngestionService(
        storage=storage,
        transcoder=factory.get_transcoder(),
        staging=factory.get_staging_area(),
        settings=settings,
    )


def get_deletion_service(
    storage: Annotated[VideoStorageService, Depends(get_storage_service)],
) -> VideoDeletionService:
    return VideoDeletionService(storage)


def get_access_service(
    storage: Annotated[VideoStorageService, Depends(get_storage_service)],
) -> VideoAccessService:
    return VideoAccessService(storage)


def get_catalog_service(
    storage: Annotated[VideoStorageService, Depends(get_storage_service)],
) -> VideoCatalogService:
    return VideoCatalogService(storage)


def get_current_owner(
    factory: Annotated[InfrastructureFactory, Depends(get_infrastructure_factory)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(_bearer),
    ],
) -> str:
    """Resolve the caller's identity from the bearer token.

    Raises:
        AuthenticationException: If the header is missing or the token
            does not verify.
    """
    if credentials is None:
        raise AuthenticationException("Missing bearer token")
    return factory.get_token_verifier().verify(credentials.credentials)


# Type aliases for cleaner route signatures
SettingsDep = Annotated[Settings, Depends(get_settings)]
FactoryDep = Annotated[InfrastructureFactory, Depends(get_infrastructure_factory)]
IngestionServiceDep = Annotated[VideoIngestionService, Depends(get_ingestion_service)]
DeletionServiceDep = Annotated[VideoDeletionService, Depends(get_deletion_service)]
AccessServiceDep = Annotated[VideoAccessService, Depends(get_access_service)]
CatalogServiceDep = Annotated[VideoCatalogService, Depends(get_catalog_service)]
OwnerDep = Annotated[str, Depends(get_current_owner)]


async def init_services(settings: Settings) -> None:
    """Initialize all infrastructure services on startup.

    Creates the metadata schema and the videos bucket so the first
    request does not have to.

    Args:
        settings: Application settings.
    """
    factory = get_factory(settings)

    repository = factory.get_video_repository()
    await repository.ensure_schema()

    storage = VideoStorageService(
        blob_storage=factory.get_blob_storage(),
        repository=repository,
        blob_settings=settings.blob_storage,
    )
    await storage.ensure_bucket()

    factory.get_transcoder()
    factory.get_staging_area().root.mkdir(parents=True, exist_ok=True)
    logger.info(
        "Services initialized",
        extra={
            "metadata_provider": settings.metadata_db.provider,
            "bucket": settings.blob_storage.bucket,
        },
    )


async def shutdown_services() -> None:
    """Shutdown all infrastructure services."""
    try:
        factory: InfrastructureFactory | None = get_factory()
    except ValueError:
        factory = None
    try:
        if factory is not None:
            await factory.close_all()
    finally:
        reset_factory()
        get_settings.cache_clear()
