"""Video management endpoints."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, File, UploadFile, status
from pydantic import BaseModel, Field

from src.api.dependencies import (
    AccessServiceDep,
    CatalogServiceDep,
    DeletionServiceDep,
    IngestionServiceDep,
    OwnerDep,
    SettingsDep,
)
from src.application.dtos.access import AccessGrant
from src.application.dtos.ingestion import IngestVideoRequest
from src.domain.models.video import VideoRecord

router = APIRouter()


class VideoResponse(BaseModel):
    """Stored video as returned to clients."""

    id: str = Field(description="Internal video UUID")
    storage_key: str = Field(description="Object key of the transcoded video")
    original_name: str = Field(description="Filename supplied by the uploader")
    mime_type: str = Field(description="Content type of the stored video")
    size_bytes: int = Field(description="Size of the stored video in bytes")
    owner_id: str | None = Field(default=None, description="Uploader identity")
    uploaded_at: datetime | None = Field(
        default=None,
        description="When the video was stored",
    )

    @classmethod
    def from_record(cls, record: VideoRecord) -> "VideoResponse":
        return cls(**record.model_dump())


class UploadResponse(BaseModel):
    """Response for a completed upload."""

    message: str = Field(description="Status message")
    video: VideoResponse = Field(description="The stored video")


class AccessUrlResponse(BaseModel):
    """Pre-signed URL for reading a stored object."""

    url: str = Field(description="Pre-signed GET URL")
    key: str = Field(description="Object key the URL points at")
    expires_in_seconds: int = Field(description="Lifetime of the URL in seconds")
    expires_at: datetime = Field(description="When the URL stops working")

    @classmethod
    def from_grant(cls, grant: AccessGrant) -> "AccessUrlResponse":
        return cls(**grant.model_dump())


class DeleteResponse(BaseModel):
    """Response for video deletion."""

    success: bool = Field(description="Whether deletion was successful")
    video_id: str = Field(description="ID of deleted video")
    message: str = Field(description="Status message")


@router.post(
    "/videos/upload",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload video",
    description=(
        "Upload a video file. The original is stored, transcoded to a "
        "640px-wide H.264/AAC MP4, and the transcoded copy is recorded."
    ),
)
async def upload_video(
    video: Annotated[UploadFile, File(description="Video file to upload")],
    owner_id: OwnerDep,
    service: IngestionServiceDep,
) -> UploadResponse:
    """Run the ingestion pipeline for one uploaded file."""
    request = IngestVideoRequest(
        filename=video.filename or "",
        mime_type=video.content_type or "",
        size_bytes=video.size,
        owner_id=owner_id,
    )
    try:
        record = await service.ingest(video.file, request)
    finally:
        await video.close()

    return UploadResponse(
        message="Upload & processing successful",
        video=VideoResponse.from_record(record),
    )


@router.get(
    "/videos",
    response_model=list[VideoResponse],
    summary="List videos",
    description="List all stored videos, most recent first.",
)
async def list_videos(service: CatalogServiceDep) -> list[VideoResponse]:
    """List stored videos."""
    records = await service.list_videos()
    return [VideoResponse.from_record(r) for r in records]


@router.get(
    "/videos/raw/{key:path}",
    response_model=AccessUrlResponse,
    summary="Raw download URL",
    description="Get a pre-signed URL for an original, untranscoded upload.",
)
async def get_raw_download_url(
    key: str,
    service: AccessServiceDep,
    settings: SettingsDep,
) -> AccessUrlResponse:
    """Sign a URL for an object in the raw namespace.

    Accepts the key with or without its namespace prefix.
    """
    prefix = f"{settings.blob_storage.raw_prefix.strip('/')}/"
    raw_key = key if key.startswith(prefix) else f"{prefix}{key}"
    grant = await service.issue_access_url(raw_key)
    return AccessUrlResponse.from_grant(grant)


@router.get(
    "/videos/{video_id}",
    response_model=VideoResponse,
    summary="Get video details",
    description="Get the stored record of a specific video.",
)
async def get_video(
    video_id: str,
    service: CatalogServiceDep,
) -> VideoResponse:
    """Get details for a specific video."""
    record = await service.get_video(video_id)
    return VideoResponse.from_record(record)


@router.get(
    "/videos/{video_id}/stream",
    response_model=AccessUrlResponse,
    summary="Stream URL",
    description="Get a pre-signed URL for playing back a transcoded video.",
)
async def get_stream_url(
    video_id: str,
    service: AccessServiceDep,
) -> AccessUrlResponse:
    """Sign a URL for a video's transcoded object."""
    grant = await service.issue_access_url(video_id)
    return AccessUrlResponse.from_grant(grant)


@router.delete(
    "/videos/{video_id}",
    response_model=DeleteResponse,
    summary="Delete video",
    description="Delete a video's stored object and then its record.",
)
async def delete_video(
    video_id: str,
    _owner_id: OwnerDep,
    service: DeletionServiceDep,
) -> DeleteResponse:
    """Delete a video."""
    await service.delete_video(video_id)
    return DeleteResponse(
        success=True,
        video_id=video_id,
        message=f"Video {video_id} deleted successfully",
    )
