"""File byte storage on the local filesystem.

Uploads are streamed to UPLOAD_DIR in chunks under a sanitized,
collision-resistant name. Removal is best-effort: a failure is logged and
reported to the caller, never raised.
"""
import logging
import re
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os
from fastapi import UploadFile

from filebox.config import settings
from filebox.errors import InvalidRequestError

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9._-]")
_READ_CHUNK = 1024 * 1024


def sanitize_filename(name: str) -> str:
    """Replace anything outside [A-Za-z0-9._-] with underscores."""
    safe = _UNSAFE_CHARS.sub("_", name or "")
    return safe or "unnamed"


@dataclass
class StoredUpload:
    """Bytes already written to disk for one incoming file."""
    path_on_disk: str
    stored_name: str
    original_name: str
    size: int
    mime: Optional[str] = None


class FileStorageService:
    """Handles file writes and removals under the upload directory."""

    def __init__(self, base_path: Path | str, max_file_bytes: int):
        self.base_path = Path(base_path)
        self.max_file_bytes = max_file_bytes

    async def init(self) -> None:
        await aiofiles.os.makedirs(self.base_path, exist_ok=True)

    def _stored_name(self, original_name: str) -> str:
        return f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}_{sanitize_filename(original_name)}"

    async def save_upload(self, upload: UploadFile) -> StoredUpload:
        """Stream an uploaded file to disk. Oversized files are removed and rejected.

        The multipart parser has already spooled the part by now; the batch-level
        Content-Length check in main.py is what stops oversized bodies early.
        """
        original_name = upload.filename or "unnamed"
        stored_name = self._stored_name(original_name)
        file_path = self.base_path / stored_name
        await self.init()

        size = 0
        try:
            async with aiofiles.open(file_path, "wb") as f:
                while chunk := await upload.read(_READ_CHUNK):
                    size += len(chunk)
                    if size > self.max_file_bytes:
                        raise InvalidRequestError(
                            f"File '{original_name}' exceeds the {self.max_file_bytes} byte limit"
                        )
                    await f.write(chunk)
        except BaseException:
            await self.delete(str(file_path))
            raise

        return StoredUpload(
            path_on_disk=str(file_path),
            stored_name=stored_name,
            original_name=original_name,
            size=size,
            mime=upload.content_type,
        )

    async def delete(self, path: Optional[str]) -> bool:
        """Remove a file if present. Returns False when removal failed."""
        if not path:
            return True
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            return True
        except OSError as e:
            logger.warning(f"Could not remove {path}: {e}")
            return False
        return True


file_storage = FileStorageService(settings.UPLOAD_DIR, settings.MAX_UPLOAD_BYTES)
