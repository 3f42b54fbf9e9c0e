"""Domain exceptions for the video vault."""


class DomainException(Exception):
    """Base exception for domain errors."""


class InvalidUploadException(DomainException):
    """Raised when an upload is rejected before any stage runs."""

    def __init__(self, filename: str, reason: str) -> None:
        self.filename = filename
        self.reason = reason
        super().__init__(f"Upload '{filename}' rejected: {reason}")


class UploadTooLargeException(InvalidUploadException):
    """Raised when an upload exceeds the configured size limit."""

    def __init__(self, filename: str, size_bytes: int, max_bytes: int) -> None:
        self.size_bytes = size_bytes
        self.max_bytes = max_bytes
        super().__init__(
            filename,
            f"size {size_bytes} bytes exceeds the limit of {max_bytes} bytes",
        )


class NotFoundException(DomainException):
    """Base exception for unknown identifiers or keys."""


class VideoNotFoundException(NotFoundException):
    """Raised when a requested video record is not found."""

    def __init__(self, video_id: str) -> None:
        self.video_id = video_id
        super().__init__(f"Video not found: {video_id}")


class ObjectNotFoundException(NotFoundException):
    """Raised when an object key does not exist in the object store."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Object not found: {key}")


class StorageException(DomainException):
    """Raised when an object store or staging operation fails."""

    def __init__(self, operation: str, key: str, reason: str) -> None:
        self.operation = operation
        self.key = key
        self.reason = reason
        super().__init__(f"Storage {operation} failed for '{key}': {reason}")


class ProcessingException(DomainException):
    """Raised when transcoding fails, times out or cannot be started."""

    def __init__(self, reason: str, diagnostics: str = "") -> None:
        self.reason = reason
        self.diagnostics = diagnostics
        super().__init__(f"Processing failed: {reason}")


class MetadataException(DomainException):
    """Raised when a metadata store operation fails."""

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"Metadata {operation} failed: {reason}")


class AuthenticationException(DomainException):
    """Raised when a bearer token is missing, malformed or expired."""

    def __init__(self, reason: str = "Invalid or expired token") -> None:
        self.reason = reason
        super().__init__(reason)
