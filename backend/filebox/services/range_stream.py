"""HTTP byte-range streaming for seekable media playback.

Supports the single-range form `bytes=<start>-<end>` with an optional end.
Bodies are read from disk in chunks so a range is never held in memory whole.
This module only reads a record's path, size and MIME; it never touches
metadata.
"""
import re
from dataclasses import dataclass
from typing import AsyncIterator, Optional

import aiofiles
import aiofiles.os
from fastapi.responses import StreamingResponse

from filebox.config import settings
from filebox.errors import GoneError, RangeNotSatisfiableError

_RANGE_RE = re.compile(r"^bytes=(\d+)-(\d*)$")

DEFAULT_MIME = "application/octet-stream"


@dataclass(frozen=True)
class ByteRange:
    start: int
    end: int  # inclusive

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def content_range(self, file_size: int) -> str:
        return f"bytes {self.start}-{self.end}/{file_size}"


def parse_range(header: Optional[str], file_size: int) -> Optional[ByteRange]:
    """Parse a Range header against a file of `file_size` bytes.

    Returns None when no header was sent. Raises RangeNotSatisfiableError for
    a malformed header (without size) or an out-of-bounds range (with size).
    """
    if header is None:
        return None
    match = _RANGE_RE.match(header.strip())
    if not match:
        raise RangeNotSatisfiableError(f"Malformed range header: {header!r}")

    start = int(match.group(1))
    end = int(match.group(2)) if match.group(2) else file_size - 1
    if start >= file_size or end >= file_size or end < start:
        raise RangeNotSatisfiableError(
            f"Range {start}-{end} outside of {file_size} bytes", file_size=file_size
        )
    return ByteRange(start, end)


async def iter_file(
    path: str,
    start: int = 0,
    length: Optional[int] = None,
    chunk_size: int = settings.STREAM_CHUNK_BYTES,
) -> AsyncIterator[bytes]:
    """Yield `length` bytes from `start` (to EOF when length is None)."""
    async with aiofiles.open(path, "rb") as f:
        if start:
            await f.seek(start)
        remaining = length
        while remaining is None or remaining > 0:
            size = chunk_size if remaining is None else min(chunk_size, remaining)
            chunk = await f.read(size)
            if not chunk:
                break
            if remaining is not None:
                remaining -= len(chunk)
            yield chunk


async def stat_or_gone(path: str, what: str = "File") -> int:
    """Size of the file at `path`; GoneError when the bytes are missing."""
    try:
        stat = await aiofiles.os.stat(path)
    except (FileNotFoundError, NotADirectoryError):
        raise GoneError(f"{what} missing on disk")
    return stat.st_size


async def stream_full(path: str, mime: Optional[str]) -> StreamingResponse:
    """Whole file, 200, no range handling."""
    file_size = await stat_or_gone(path)
    return StreamingResponse(
        iter_file(path),
        status_code=200,
        media_type=mime or DEFAULT_MIME,
        headers={"Content-Length": str(file_size)},
    )


async def stream_range(
    path: str,
    mime: Optional[str],
    range_header: Optional[str],
) -> StreamingResponse:
    """200 with the whole file when no Range is sent, else 206 with the span."""
    file_size = await stat_or_gone(path)
    byte_range = parse_range(range_header, file_size)
    media_type = mime or DEFAULT_MIME

    if byte_range is None:
        return StreamingResponse(
            iter_file(path),
            status_code=200,
            media_type=media_type,
            headers={
                "Content-Length": str(file_size),
                "Accept-Ranges": "bytes",
            },
        )

    return StreamingResponse(
        iter_file(path, byte_range.start, byte_range.length),
        status_code=206,
        media_type=media_type,
        headers={
            "Content-Range": byte_range.content_range(file_size),
            "Accept-Ranges": "bytes",
            "Content-Length": str(byte_range.length),
        },
    )
