"""Pydantic settings models for application configuration."""

import tempfile
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseModel):
    """Application-level settings."""

    name: str = "video-vault-server"
    version: str = "0.1.0"
    environment: Literal["dev", "staging", "prod"] = "dev"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


class ServerSettings(BaseModel):
    """HTTP server settings."""

    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    workers: int = Field(default=1, ge=1, le=32)
    reload: bool = False
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    api_prefix: str = "/api"
    docs_enabled: bool = True


class BlobStorageSettings(BaseModel):
    """Object store settings (MinIO/S3)."""

    provider: Literal["minio", "s3"] = "minio"
    endpoint: str = "localhost:9000"
    access_key: str = ""
    secret_key: str = ""
    use_ssl: bool = False
    region: str = "us-east-1"
    bucket: str = "videos"
    raw_prefix: str = "raw"
    processed_prefix: str = "processed"
    presigned_url_expiry_seconds: int = Field(default=3600, ge=1, le=604800)


class MetadataDBSettings(BaseModel):
    """Metadata store settings (PostgreSQL or MongoDB)."""

    provider: Literal["postgres", "mongodb"] = "postgres"
    host: str = "localhost"
    port: int = 5432
    username: str = ""
    password: str = ""
    database: str = "videos"
    auth_source: str = "admin"
    url: str | None = None
    table: str = "videos"
    echo: bool = False


class UploadSettings(BaseModel):
    """Inbound upload validation settings."""

    max_upload_mb: int = Field(default=200, ge=1)
    allowed_mime_pattern: str = r"^video/"

    @property
    def max_upload_bytes(self) -> int:
        """Maximum accepted upload size in bytes."""
        return self.max_upload_mb * 1024 * 1024


class StagingSettings(BaseModel):
    """Local temporary stage for in-flight uploads."""

    directory: Path = Field(
        default_factory=lambda: Path(tempfile.gettempdir()) / "video-vault"
    )
    chunk_size: int = Field(default=1024 * 1024, ge=4096)


class TranscodingSettings(BaseModel):
    """External transcoder settings.

    The encoding profile itself is fixed; only the executable and the
    wall-clock bound can be tuned.
    """

    ffmpeg_path: str = "ffmpeg"
    timeout_seconds: int = Field(default=900, ge=1)


class AuthSettings(BaseModel):
    """Bearer token verification settings."""

    jwt_secret: str = "dev-secret-change-me"
    algorithm: Literal["HS256", "HS384", "HS512"] = "HS256"
    owner_claim: str = "sub"


class TelemetrySettings(BaseModel):
    """Logging settings."""

    enabled: bool = True
    log_format: Literal["json", "text"] = "json"
    log_level: str = "INFO"


class Settings(BaseSettings):
    """Root settings container with environment loading."""

    app: AppSettings = Field(default_factory=AppSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    blob_storage: BlobStorageSettings = Field(default_factory=BlobStorageSettings)
    metadata_db: MetadataDBSettings = Field(default_factory=MetadataDBSettings)
    upload: UploadSettings = Field(default_factory=UploadSettings)
    staging: StagingSettings = Field(default_factory=StagingSettings)
    transcoding: TranscodingSettings = Field(default_factory=TranscodingSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VIDEO_VAULT__",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )
