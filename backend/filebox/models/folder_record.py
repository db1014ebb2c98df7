"""FolderRecord - a flat, non-nested grouping for files."""
from filebox.models.base import RecordBase


class FolderRecord(RecordBase):
    name: str
