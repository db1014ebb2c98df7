"""JSON-file backed metadata stores."""
from filebox.store.json_collection import JsonCollection
from filebox.store.records import FileStore, FolderStore, RecordStore

__all__ = ["JsonCollection", "RecordStore", "FileStore", "FolderStore"]
