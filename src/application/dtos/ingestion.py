"""DTOs for video ingestion operations."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class ProcessingStep(str, Enum):
    """Individual steps in the ingestion pipeline."""

    VALIDATING = "validating"
    STAGING = "staging"
    UPLOADING_RAW = "uploading_raw"
    TRANSCODING = "transcoding"
    UPLOADING_PROCESSED = "uploading_processed"
    CLEANING_UP = "cleaning_up"
    STORING_METADATA = "storing_metadata"
    COMPLETED = "completed"


class IngestVideoRequest(BaseModel):
    """Descriptor of an uploaded file, as declared by the client."""

    filename: str = Field(description="Original file name supplied by the client")
    mime_type: str = Field(description="Declared MIME type of the upload")
    size_bytes: int | None = Field(
        default=None,
        ge=0,
        description="Declared size in bytes, when the client sent one",
    )
    owner_id: str | None = Field(
        default=None,
        description="Authenticated uploader identity",
    )


class IngestionProgress(BaseModel):
    """Progress information for an ongoing ingestion."""

    current_step: ProcessingStep = Field(description="Current processing step")
    overall_progress: float = Field(
        ge=0.0,
        le=1.0,
        description="Overall ingestion progress (0.0 to 1.0)",
    )
    message: str = Field(description="Human-readable progress message")
    started_at: datetime = Field(description="When ingestion started")
