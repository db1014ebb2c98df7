"""Folder membership changes that span the files and folders collections.

Each operation runs under `FolderStore.membership_lock`, so a folder cannot be
deleted between the check of a folder id and the write that stores it.
"""
import logging
from typing import Optional

from filebox.errors import InvalidRequestError
from filebox.models import FileRecord, FolderRecord
from filebox.store import FileStore, FolderStore

logger = logging.getLogger(__name__)


async def validate_folder_ref(folders: FolderStore, folder_id: Optional[str]) -> Optional[str]:
    """Normalize an optional folder reference. Empty means unfiled."""
    if not folder_id:
        return None
    if not await folders.exists(folder_id):
        raise InvalidRequestError("Invalid folderId")
    return folder_id


async def move_file(
    files: FileStore,
    folders: FolderStore,
    file_id: str,
    folder_id: Optional[str],
) -> Optional[FileRecord]:
    """Assign a file to a folder (or root). None if the file is unknown."""
    async with folders.membership_lock:
        folder_id = await validate_folder_ref(folders, folder_id)
        return await files.update(file_id, {"folder_id": folder_id})


async def delete_folder(
    folders: FolderStore,
    files: FileStore,
    folder_id: str,
) -> Optional[FolderRecord]:
    """Remove a folder and move its files back to root. None if unknown."""
    async with folders.membership_lock:
        removed = await folders.remove(folder_id)
        if not removed:
            return None
        unfiled = await files.unfile(removed.id)

    logger.info(f"Deleted folder {removed.id}, unfiled {unfiled} file(s)")
    return removed
