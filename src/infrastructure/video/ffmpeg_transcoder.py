"""FFmpeg implementation of video transcoding."""

import asyncio
import subprocess
import time
from pathlib import Path

from src.commons.telemetry import get_logger, timed
from src.infrastructure.video.base import (
    DEFAULT_PROFILE,
    TranscodeProfile,
    TranscodeResult,
    TranscoderBase,
    TranscodingError,
)

# ffmpeg can print a lot on failure; keep the tail, where the error is.
_MAX_STDERR_CHARS = 8000


def _decode_tail(raw: bytes | str | None) -> str:
    if raw is None:
        return ""
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
    return text[-_MAX_STDERR_CHARS:]


class FFmpegTranscoder(TranscoderBase):
    """FFmpeg-based transcoding to the fixed output profile.

    Requires ffmpeg to be installed and available in PATH (or at
    ``ffmpeg_path``). The command is built as an argument vector and
    never passed through a shell, so file names are inert.
    """

    def __init__(
        self,
        ffmpeg_path: str = "ffmpeg",
        timeout_seconds: float = 900,
    ) -> None:
        """Initialize FFmpeg transcoder.

        Args:
            ffmpeg_path: Path to ffmpeg executable.
            timeout_seconds: Wall-clock bound after which the encode is
                killed and reported as failed.
        """
        self._ffmpeg = ffmpeg_path
        self._timeout = timeout_seconds
        self._logger = get_logger(__name__)

    @property
    def profile(self) -> TranscodeProfile:
        return DEFAULT_PROFILE

    def build_command(self, input_path: Path, output_path: Path) -> list[str]:
        """Build the ffmpeg argument vector for one transcode."""
        p = self.profile
        return [
            self._ffmpeg,
            "-nostdin",
            "-hide_banner",
            "-i",
            str(input_path),
            "-vf",
            f"scale={p.width}:-2",
            "-c:v",
            p.video_codec,
            "-preset",
            p.preset,
            "-crf",
            str(p.crf),
            "-c:a",
            p.audio_codec,
            "-f",
            p.container,
            "-y",
            str(output_path),
        ]

    @timed
    async def transcode(self, input_path: Path, output_path: Path) -> TranscodeResult:
        """Transcode in the default executor, off the event loop."""
        cmd = self.build_command(input_path, output_path)
        self._logger.debug(
            "Starting ffmpeg",
            extra={"input_path": str(input_path), "output_path": str(output_path)},
        )

        start = time.perf_counter()
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._run, cmd)
        duration_ms = (time.perf_counter() - start) * 1000

        if not output_path.exists() or output_path.stat().st_size == 0:
            raise TranscodingError(f"ffmpeg produced no output at {output_path}")

        size_bytes = output_path.stat().st_size
        self._logger.debug(
            "ffmpeg finished",
            extra={"size_bytes": size_bytes, "duration_ms": round(duration_ms, 2)},
        )
        return TranscodeResult(
            path=output_path,
            size_bytes=size_bytes,
            duration_ms=duration_ms,
        )

    def _run(self, cmd: list[str]) -> None:
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                stdin=subprocess.DEVNULL,
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise TranscodingError(
                f"ffmpeg timed out after {self._timeout} seconds",
                stderr=_decode_tail(e.stderr),
                timed_out=True,
            ) from e
        except OSError as e:
            raise TranscodingError(
                f"Could not start {self._ffmpeg}: {e}",
                stderr=str(e),
            ) from e

        if result.returncode != 0:
            raise TranscodingError(
                f"ffmpeg exited with status {result.returncode}",
                stderr=_decode_tail(result.stderr),
                returncode=result.returncode,
            )
