"""Video ingestion orchestration service."""

import re
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import BinaryIO

from src.application.dtos.ingestion import (
    IngestionProgress,
    IngestVideoRequest,
    ProcessingStep,
)
from src.application.services.storage import VideoStorageService
from src.commons.settings.models import Settings
from src.commons.telemetry import LogContext, get_logger
from src.domain.exceptions import (
    InvalidUploadException,
    ProcessingException,
    StorageException,
    UploadTooLargeException,
)
from src.domain.models.video import (
    VideoRecord,
    new_video_id,
    source_extension,
)
from src.infrastructure.staging.local import (
    LocalStagingArea,
    StagingLimitExceededError,
)
from src.infrastructure.video.base import TranscoderBase, TranscodingError


class VideoIngestionService:
    """Orchestrates the upload, transcode and persist pipeline.

    Pipeline steps:
    1. Stage the incoming stream to a local file
    2. Upload the untouched upload to the raw namespace
    3. Transcode the staged file to the normalized MP4 profile
    4. Upload the transcoded file to the processed namespace
    5. Remove both local files
    6. Insert the video record

    Objects are always written before the record, so a failure can leave
    orphaned objects behind but never a record without its object.
    Orphans are logged with their keys for reconciliation.
    """

    def __init__(
        self,
        storage: VideoStorageService,
        transcoder: TranscoderBase,
        staging: LocalStagingArea,
        settings: Settings,
    ) -> None:
        """Initialize ingestion service with dependencies.

        Args:
            storage: Object store and metadata store access.
            transcoder: Video transcoder.
            staging: Local scratch area for the upload and its derivative.
            settings: Application settings.
        """
        self._storage = storage
        self._transcoder = transcoder
        self._staging = staging
        self._logger = get_logger(__name__)

        self._max_upload_bytes = settings.upload.max_upload_bytes
        self._allowed_mime = re.compile(settings.upload.allowed_mime_pattern)

    def validate(self, request: IngestVideoRequest) -> None:
        """Reject an upload descriptor before anything is staged.

        Raises:
            InvalidUploadException: If the filename is empty or the MIME
                type is not accepted.
            UploadTooLargeException: If the declared size exceeds the limit.
        """
        if not request.filename.strip():
            raise InvalidUploadException(request.filename, "filename is empty")
        if not self._allowed_mime.match(request.mime_type or ""):
            raise InvalidUploadException(
                request.filename,
                f"content type '{request.mime_type}' is not a video type",
            )
        declared = request.size_bytes
        if declared is not None and declared > self._max_upload_bytes:
            raise UploadTooLargeException(
                request.filename,
                declared,
                self._max_upload_bytes,
            )

    async def ingest(
        self,
        stream: BinaryIO,
        request: IngestVideoRequest,
        progress_callback: Callable[[IngestionProgress], None] | None = None,
    ) -> VideoRecord:
        """Ingest an uploaded video through the complete pipeline.

        Args:
            stream: Readable binary stream with the upload's bytes.
            request: Client-declared descriptor of the upload.
            progress_callback: Optional callback for progress updates.

        Returns:
            The stored video record, with ``uploaded_at`` set.

        Raises:
            InvalidUploadException: If the upload is rejected.
            StorageException: If staging or an object upload fails.
            ProcessingException: If transcoding fails.
            MetadataException: If the record cannot be inserted.
        """
        started_at = datetime.now(UTC)

        def report_progress(step: ProcessingStep, overall: float, message: str) -> None:
            self._logger.debug(
                "Progress update",
                extra={
                    "step": step.value,
                    "overall_progress": overall,
                    "progress_message": message,
                },
            )
            if progress_callback:
                progress_callback(
                    IngestionProgress(
                        current_step=step,
                        overall_progress=overall,
                        message=message,
                        started_at=started_at,
                    )
                )

        report_progress(ProcessingStep.VALIDATING, 0.0, "Validating upload...")
        self.validate(request)

        video_id = new_video_id()
        keys = self._storage.keys_for(video_id, request.filename)
        profile = self._transcoder.profile

        with LogContext(video_id=video_id):
            self._logger.info(
                "Starting video ingestion",
                extra={
                    "original_name": request.filename,
                    "mime_type": request.mime_type,
                    "declared_size_bytes": request.size_bytes,
                    "owner_id": request.owner_id,
                },
            )

            uploaded: list[str] = []
            staged_path: Path | None = None
            output_path: Path | None = None
            try:
                # Step 1: Stage
                report_progress(ProcessingStep.STAGING, 0.1, "Receiving upload...")
                try:
                    staged = await self._staging.stage(
                        stream,
                        suffix=source_extension(request.filename),
                        max_bytes=self._max_upload_bytes,
                    )
                except StagingLimitExceededError as e:
                    raise UploadTooLargeException(
                        request.filename,
                        e.written_bytes,
                        e.max_bytes,
                    ) from e
                except Exception as e:
                    raise StorageException("stage", request.filename, str(e)) from e
                staged_path = staged.path
                self._logger.debug(
                    "Upload staged",
                    extra={"staged_size_bytes": staged.size_bytes},
                )

                # Step 2: Upload raw
                report_progress(
                    ProcessingStep.UPLOADING_RAW, 0.3, "Uploading original..."
                )
                # A failed upload may still have written the object
                uploaded.append(keys.raw)
                await self._storage.upload_file(
                    keys.raw,
                    staged_path,
                    content_type=request.mime_type,
                    original_name=request.filename,
                )

                # Step 3: Transcode
                report_progress(ProcessingStep.TRANSCODING, 0.45, "Transcoding...")
                output_path = self._staging.allocate(f".{profile.container}")
                try:
                    result = await self._transcoder.transcode(staged_path, output_path)
                except TranscodingError as e:
                    raise ProcessingException(str(e), e.diagnostics) from e

                # Step 4: Upload processed
                report_progress(
                    ProcessingStep.UPLOADING_PROCESSED,
                    0.75,
                    "Uploading transcoded video...",
                )
                uploaded.append(keys.processed)
                await self._storage.upload_file(
                    keys.processed,
                    result.path,
                    content_type=profile.content_type,
                    original_name=request.filename,
                )

                report_progress(
                    ProcessingStep.CLEANING_UP, 0.85, "Removing temporary files..."
                )
            except Exception:
                self._log_orphans(uploaded)
                raise
            finally:
                # Step 5: Local cleanup, on success and failure alike
                self._staging.discard(staged_path, output_path)

            # Step 6: Persist metadata
            report_progress(ProcessingStep.STORING_METADATA, 0.9, "Saving metadata...")
            record = VideoRecord(
                id=video_id,
                storage_key=keys.processed,
                original_name=request.filename,
                mime_type=profile.content_type,
                size_bytes=result.size_bytes,
                owner_id=request.owner_id,
            )
            try:
                stored = await self._storage.save_record(record)
            except Exception:
                self._log_orphans(uploaded)
                raise

            report_progress(ProcessingStep.COMPLETED, 1.0, "Ingestion complete")
            self._logger.info(
                "Video ingestion completed",
                extra={
                    "storage_key": stored.storage_key,
                    "size_bytes": stored.size_bytes,
                    "transcode_ms": round(result.duration_ms, 2),
                    "total_seconds": round(
                        (datetime.now(UTC) - started_at).total_seconds(), 2
                    ),
                },
            )
            return stored

    def _log_orphans(self, keys: list[str]) -> None:
        if not keys:
            return
        self._logger.warning(
            "Orphaned objects left in storage",
            extra={"bucket": self._storage.bucket, "orphaned_keys": list(keys)},
        )
