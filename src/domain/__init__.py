"""Domain layer - business models and exceptions."""

from src.domain.exceptions import (
    AuthenticationException,
    DomainException,
    InvalidUploadException,
    MetadataException,
    NotFoundException,
    ObjectNotFoundException,
    ProcessingException,
    StorageException,
    UploadTooLargeException,
    VideoNotFoundException,
)
from src.domain.models import StorageKeys, VideoRecord

__all__ = [
    # Exceptions
    "DomainException",
    "InvalidUploadException",
    "UploadTooLargeException",
    "NotFoundException",
    "VideoNotFoundException",
    "ObjectNotFoundException",
    "StorageException",
    "ProcessingException",
    "MetadataException",
    "AuthenticationException",
    # Models
    "VideoRecord",
    "StorageKeys",
]
