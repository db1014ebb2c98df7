"""Metadata stores and the FastAPI dependencies that hand them to routes.

Usage in routes:
    from filebox.database import get_files_store

    @router.get("/items")
    async def list_items(files: FileStore = Depends(get_files_store)):
        return await files.list()
"""
from pathlib import Path

from filebox.config import settings
from filebox.services.file_storage import FileStorageService, file_storage
from filebox.services.thumbnails import ThumbnailGenerator, thumbnailer
from filebox.store import FileStore, FolderStore

files_store = FileStore(Path(settings.DATA_DIR) / "files.json")
folders_store = FolderStore(Path(settings.DATA_DIR) / "folders.json")


async def init_stores() -> None:
    """Create data directories and empty collections on first run."""
    await files_store.init()
    await folders_store.init()
    await file_storage.init()


def get_files_store() -> FileStore:
    return files_store


def get_folders_store() -> FolderStore:
    return folders_store


def get_file_storage() -> FileStorageService:
    return file_storage


def get_thumbnailer() -> ThumbnailGenerator:
    return thumbnailer
