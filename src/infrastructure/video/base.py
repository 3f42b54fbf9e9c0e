"""Abstract base classes for video transcoding."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from src.domain.models.video import PROCESSED_CONTENT_TYPE


@dataclass(frozen=True)
class TranscodeProfile:
    """Normalized output profile every upload is converted to."""

    width: int = 640
    video_codec: str = "libx264"
    preset: str = "fast"
    crf: int = 28
    audio_codec: str = "aac"
    container: str = "mp4"
    content_type: str = PROCESSED_CONTENT_TYPE


DEFAULT_PROFILE = TranscodeProfile()


@dataclass
class TranscodeResult:
    """Outcome of a successful transcode."""

    path: Path
    size_bytes: int
    duration_ms: float


class TranscodingError(Exception):
    """Raised when the transcoder fails, times out or cannot be spawned."""

    def __init__(
        self,
        message: str,
        stderr: str = "",
        returncode: int | None = None,
        timed_out: bool = False,
    ) -> None:
        self.stderr = stderr
        self.returncode = returncode
        self.timed_out = timed_out
        super().__init__(message)

    @property
    def diagnostics(self) -> str:
        """Tool output for the caller, falling back to the message."""
        return self.stderr.strip() or str(self)


class TranscoderBase(ABC):
    """Abstract base class for video transcoding.

    Implementations should handle:
    - FFmpeg (subprocess, argv only)
    """

    @property
    @abstractmethod
    def profile(self) -> TranscodeProfile:
        """Output profile produced by this transcoder."""

    @abstractmethod
    async def transcode(self, input_path: Path, output_path: Path) -> TranscodeResult:
        """Convert an untrusted input video into the output profile.

        Args:
            input_path: Local source file.
            output_path: Where to write the transcoded file.

        Returns:
            Result describing the written file.

        Raises:
            TranscodingError: On spawn failure, non-zero exit, timeout or
                a missing output file.
        """
