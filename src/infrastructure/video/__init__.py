"""Video transcoding services."""

from src.infrastructure.video.base import (
    DEFAULT_PROFILE,
    TranscodeProfile,
    TranscodeResult,
    TranscoderBase,
    TranscodingError,
)
from src.infrastructure.video.ffmpeg_transcoder import FFmpegTranscoder

__all__ = [
    # Base classes
    "TranscoderBase",
    "TranscodeProfile",
    "TranscodeResult",
    "TranscodingError",
    "DEFAULT_PROFILE",
    # Implementations
    "FFmpegTranscoder",
]
