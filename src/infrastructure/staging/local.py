"""Local disk staging for uploads and transcoder output."""

import asyncio
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from src.commons.telemetry import get_logger


class StagingLimitExceededError(Exception):
    """Raised when a staged stream grows past the allowed size."""

    def __init__(self, written_bytes: int, max_bytes: int) -> None:
        self.written_bytes = written_bytes
        self.max_bytes = max_bytes
        super().__init__(
            f"Staged {written_bytes} bytes, more than the limit of {max_bytes}"
        )


@dataclass
class StagedFile:
    """A file written to the staging directory."""

    path: Path
    size_bytes: int


class LocalStagingArea:
    """Scratch directory holding files for the duration of one request.

    Every file gets a fresh uuid4 name, so concurrent requests never
    collide and user-supplied names never reach the filesystem.
    """

    def __init__(self, root: Path, chunk_size: int = 1024 * 1024) -> None:
        """Initialize staging area.

        Args:
            root: Directory for staged files. Created on first use.
            chunk_size: Bytes copied per read from the incoming stream.
        """
        self._root = Path(root)
        self._chunk_size = chunk_size
        self._logger = get_logger(__name__)

    @property
    def root(self) -> Path:
        return self._root

    def allocate(self, suffix: str = "") -> Path:
        """Reserve a fresh unique path inside the staging directory."""
        self._root.mkdir(parents=True, exist_ok=True)
        return self._root / f"{uuid.uuid4()}{suffix}"

    async def stage(
        self,
        stream: BinaryIO,
        suffix: str = "",
        max_bytes: int | None = None,
    ) -> StagedFile:
        """Copy a stream to a fresh local file.

        Args:
            stream: Readable binary stream, consumed to the end.
            suffix: Extension for the staged file name.
            max_bytes: Upper bound on the bytes accepted.

        Returns:
            The staged file.

        Raises:
            StagingLimitExceededError: If the stream is larger than
                ``max_bytes``. The partial file is removed first.
        """
        path = self.allocate(suffix)
        loop = asyncio.get_running_loop()
        try:
            size = await loop.run_in_executor(
                None, self._copy, stream, path, max_bytes
            )
        except BaseException:
            path.unlink(missing_ok=True)
            raise

        self._logger.debug(
            "Staged upload",
            extra={"path": str(path), "size_bytes": size},
        )
        return StagedFile(path=path, size_bytes=size)

    def _copy(self, stream: BinaryIO, path: Path, max_bytes: int | None) -> int:
        written = 0
        with path.open("wb") as out:
            while chunk := stream.read(self._chunk_size):
                written += len(chunk)
                if max_bytes is not None and written > max_bytes:
                    raise StagingLimitExceededError(written, max_bytes)
                out.write(chunk)
        return written

    def discard(self, *paths: Path | None) -> None:
        """Remove staged files, logging instead of raising on failure."""
        for path in paths:
            if path is None:
                continue
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                self._logger.warning(
                    "Failed to remove staged file",
                    extra={"path": str(path), "error": str(e)},
                )
