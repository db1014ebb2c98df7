"""Error taxonomy shared by stores, services and routes.

Route-facing errors carry the HTTP status they map to; main.py registers a
single handler that turns them into `{"error": message}` responses.
"""
from typing import Optional


class FileboxError(Exception):
    """Base for errors that map directly onto an HTTP response."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(FileboxError):
    """Referenced record id does not exist in metadata."""

    status_code = 404


class GoneError(FileboxError):
    """Record exists but its bytes (file or thumbnail) are missing from disk."""

    status_code = 410


class InvalidRequestError(FileboxError):
    status_code = 400


class RangeNotSatisfiableError(FileboxError):
    """Byte range that cannot be served.

    `file_size` is None when the header could not be parsed at all; the
    response then omits Content-Range.
    """

    status_code = 416

    def __init__(self, message: str, file_size: Optional[int] = None):
        self.file_size = file_size
        super().__init__(message)

    @property
    def headers(self) -> dict:
        if self.file_size is None:
            return {}
        return {"Content-Range": f"bytes */{self.file_size}"}


class ThumbnailError(Exception):
    """Frame extraction failed. Logged and absorbed, never sent to clients."""
    pass


class StorageCorruptionError(Exception):
    """Canonical collection file could not be parsed as a JSON array."""
    pass
