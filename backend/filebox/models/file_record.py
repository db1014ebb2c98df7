"""FileRecord - metadata for one stored file (bytes live under UPLOAD_DIR)."""
from typing import Optional

from pydantic import AliasChoices, Field

from filebox.models.base import RecordBase


class FileRecord(RecordBase):
    original_name: str
    stored_name: str
    size: int
    mime: Optional[str] = None
    # Older collections stored this under "path"
    path_on_disk: str = Field(
        validation_alias=AliasChoices("pathOnDisk", "path_on_disk", "path"),
        serialization_alias="pathOnDisk",
    )
    is_video: bool = False
    thumb_path: Optional[str] = None
    folder_id: Optional[str] = None
