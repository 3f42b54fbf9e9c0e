"""Infrastructure layer - external service implementations."""

from src.infrastructure.auth import JWTTokenVerifier
from src.infrastructure.factory import (
    InfrastructureFactory,
    get_factory,
    reset_factory,
)
from src.infrastructure.metadata import (
    DocumentVideoRepository,
    SqlVideoRepository,
    VideoRepositoryBase,
)
from src.infrastructure.staging import (
    LocalStagingArea,
    StagedFile,
    StagingLimitExceededError,
)
from src.infrastructure.video import (
    FFmpegTranscoder,
    TranscodeResult,
    TranscoderBase,
    TranscodingError,
)

__all__ = [
    # Factory
    "InfrastructureFactory",
    "get_factory",
    "reset_factory",
    # Auth
    "JWTTokenVerifier",
    # Metadata
    "VideoRepositoryBase",
    "SqlVideoRepository",
    "DocumentVideoRepository",
    # Staging
    "LocalStagingArea",
    "StagedFile",
    "StagingLimitExceededError",
    # Video
    "TranscoderBase",
    "TranscodeResult",
    "TranscodingError",
    "FFmpegTranscoder",
]
