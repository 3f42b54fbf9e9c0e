"""Video record domain model."""

from datetime import UTC, datetime
from pathlib import PurePosixPath
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

PROCESSED_CONTENT_TYPE = "video/mp4"
PROCESSED_EXTENSION = ".mp4"


def new_video_id() -> str:
    """Generate a fresh video identifier."""
    return str(uuid4())


def source_extension(filename: str) -> str:
    """Return the lower-cased extension of an uploaded filename.

    Falls back to ``.mp4`` when the name carries no usable extension.
    Only the final path component is considered, so directory parts a
    client may send are ignored.
    """
    suffix = PurePosixPath(filename.replace("\\", "/")).suffix.lower()
    if not suffix or len(suffix) > 10 or not suffix[1:].isalnum():
        return PROCESSED_EXTENSION
    return suffix


class VideoRecord(BaseModel):
    """Persisted metadata describing one ingested, transcoded video.

    A record exists only while its processed object exists at
    ``storage_key`` in the object store.
    """

    id: str = Field(
        default_factory=new_video_id,
        description="Internal UUID for this video record",
    )
    storage_key: str = Field(
        min_length=1,
        description="Object store key of the processed artifact",
    )
    original_name: str = Field(description="Filename supplied by the uploader")
    mime_type: str = Field(
        default=PROCESSED_CONTENT_TYPE,
        description="Content type of the stored artifact",
    )
    size_bytes: int = Field(ge=0, description="Size of the stored artifact")
    owner_id: str | None = Field(
        default=None,
        description="Identity of the authenticated uploader",
    )
    uploaded_at: datetime | None = Field(
        default=None,
        description="Set by the metadata store on insert",
    )

    @field_validator("uploaded_at")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        # SQLite and BSON hand back naive datetimes; both are stored as UTC.
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class StorageKeys(BaseModel):
    """Object store keys assigned to one ingestion."""

    raw: str = Field(description="Key of the untranscoded upload")
    processed: str = Field(description="Key of the transcoded artifact")

    @classmethod
    def for_video(
        cls,
        video_id: str,
        filename: str,
        raw_prefix: str = "raw",
        processed_prefix: str = "processed",
    ) -> "StorageKeys":
        """Derive both keys from the generated video id.

        Args:
            video_id: Identifier generated for this ingestion.
            filename: Original filename, used only for its extension.
            raw_prefix: Namespace of untranscoded uploads.
            processed_prefix: Namespace of transcoded artifacts.

        Returns:
            Keys that cannot collide across ingestions.
        """
        return cls(
            raw=f"{raw_prefix}/{video_id}{source_extension(filename)}",
            processed=f"{processed_prefix}/{video_id}{PROCESSED_EXTENSION}",
        )
