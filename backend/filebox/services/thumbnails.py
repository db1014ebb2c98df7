"""Video thumbnail generation.

Callers depend on the `ThumbnailGenerator` interface only. The ffmpeg
implementation grabs a single frame near THUMB_SEEK_SECONDS, scales it to
THUMB_WIDTH with proportional height and writes `<record id>.jpg` into the
thumbnails directory. Failures raise ThumbnailError; there is no retry.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import aiofiles.os

from filebox.config import settings
from filebox.errors import ThumbnailError

logger = logging.getLogger(__name__)


class ThumbnailGenerator(ABC):
    """Produces a still image for a video and returns its path."""

    def __init__(self, thumbs_dir: Path | str):
        self.thumbs_dir = Path(thumbs_dir)

    def thumb_path_for(self, record_id: str) -> Path:
        """Thumbnail location is derived from the record id alone."""
        return self.thumbs_dir / f"{record_id}.jpg"

    @abstractmethod
    async def generate(self, source_path: str, record_id: str) -> str:
        pass


class FfmpegThumbnailGenerator(ThumbnailGenerator):

    def __init__(
        self,
        thumbs_dir: Path | str,
        ffmpeg_path: str = "ffmpeg",
        width: int = 480,
        seek_seconds: float = 1.0,
        timeout: Optional[float] = None,
    ):
        super().__init__(thumbs_dir)
        self.ffmpeg_path = ffmpeg_path
        self.width = width
        self.seek_seconds = seek_seconds
        self.timeout = timeout

    def build_command(self, source_path: str, out_path: Path) -> list[str]:
        return [
            self.ffmpeg_path,
            "-y",
            "-ss", f"{self.seek_seconds:g}",
            "-i", str(source_path),
            "-vf", f"scale={self.width}:-1",
            "-frames:v", "1",
            str(out_path),
        ]

    async def generate(self, source_path: str, record_id: str) -> str:
        await aiofiles.os.makedirs(self.thumbs_dir, exist_ok=True)
        out_path = self.thumb_path_for(record_id)
        cmd = self.build_command(source_path, out_path)

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            raise ThumbnailError(f"could not start {self.ffmpeg_path}: {e}") from e

        try:
            code = await asyncio.wait_for(proc.wait(), timeout=self.timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            await self._discard(out_path)
            raise ThumbnailError(f"{self.ffmpeg_path} timed out after {self.timeout}s")

        if code != 0:
            await self._discard(out_path)
            raise ThumbnailError(f"{self.ffmpeg_path} exit {code}")
        if not await aiofiles.os.path.isfile(out_path):
            raise ThumbnailError(f"{self.ffmpeg_path} produced no output at {out_path}")

        logger.debug(f"Thumbnail for {record_id} written to {out_path}")
        return str(out_path)

    async def _discard(self, path: Path) -> None:
        try:
            await aiofiles.os.remove(path)
        except OSError:
            pass


thumbnailer = FfmpegThumbnailGenerator(
    settings.THUMBS_DIR,
    ffmpeg_path=settings.FFMPEG_PATH,
    width=settings.THUMB_WIDTH,
    seek_seconds=settings.THUMB_SEEK_SECONDS,
    timeout=settings.THUMB_TIMEOUT_SECONDS,
)
