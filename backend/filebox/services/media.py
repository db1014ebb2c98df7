"""Media classification from MIME type and file extension."""
import mimetypes
from enum import Enum
from typing import Optional

_GENERIC_MIMES = {"", "application/octet-stream"}


class MediaKind(str, Enum):
    VIDEO = "video"
    AUDIO = "audio"
    IMAGE = "image"
    OTHER = "other"


def classify(mime: Optional[str], extension: Optional[str] = None) -> MediaKind:
    """Classify by MIME prefix; the extension is only consulted when the
    reported MIME is missing or generic."""
    mime = (mime or "").strip().lower()
    if mime in _GENERIC_MIMES and extension:
        ext = extension if extension.startswith(".") else f".{extension}"
        mime = (mimetypes.guess_type(f"file{ext.lower()}")[0] or "").lower()

    for kind in (MediaKind.VIDEO, MediaKind.AUDIO, MediaKind.IMAGE):
        if mime.startswith(f"{kind.value}/"):
            return kind
    return MediaKind.OTHER


def is_video(mime: Optional[str], extension: Optional[str] = None) -> bool:
    return classify(mime, extension) is MediaKind.VIDEO
