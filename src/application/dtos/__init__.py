"""Data Transfer Objects for application layer."""

from src.application.dtos.access import AccessGrant
from src.application.dtos.ingestion import (
    IngestionProgress,
    IngestVideoRequest,
    ProcessingStep,
)

__all__ = [
    # Ingestion DTOs
    "IngestVideoRequest",
    "IngestionProgress",
    "ProcessingStep",
    # Access DTOs
    "AccessGrant",
]
