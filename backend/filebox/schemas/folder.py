"""Folder request schemas."""
from typing import Optional

from filebox.schemas.base import CamelModel


class FolderCreate(CamelModel):
    name: Optional[str] = None
