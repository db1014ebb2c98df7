"""Persisted record types."""
from filebox.models.base import RecordBase
from filebox.models.file_record import FileRecord
from filebox.models.folder_record import FolderRecord

__all__ = ["RecordBase", "FileRecord", "FolderRecord"]
