"""File request schemas. Responses use the FileRecord model directly."""
from typing import Optional

from filebox.schemas.base import CamelModel


class FileUpdate(CamelModel):
    """PATCH body. A missing or null folderId moves the file back to root."""
    folder_id: Optional[str] = None
