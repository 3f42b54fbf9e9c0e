"""Local staging of uploads and intermediate files."""

from src.infrastructure.staging.local import (
    LocalStagingArea,
    StagedFile,
    StagingLimitExceededError,
)

__all__ = [
    "LocalStagingArea",
    "StagedFile",
    "StagingLimitExceededError",
]
