"""Folders API routes."""
from typing import Optional

from fastapi import APIRouter, Depends

from filebox.database import get_files_store, get_folders_store
from filebox.errors import InvalidRequestError, NotFoundError
from filebox.models import FolderRecord
from filebox.schemas.common import DeleteResponse
from filebox.schemas.folder import FolderCreate
from filebox.services.folders import delete_folder as remove_folder
from filebox.store import FileStore, FolderStore

router = APIRouter(prefix="/api/folders", tags=["folders"])


@router.get("", response_model=list[FolderRecord])
async def list_folders(folders: FolderStore = Depends(get_folders_store)):
    """List all folders by name."""
    return await folders.list()


@router.post("", response_model=FolderRecord)
async def create_folder(
    body: Optional[FolderCreate] = None,
    folders: FolderStore = Depends(get_folders_store),
):
    """Create a folder. The name is trimmed and must not be empty."""
    name = ((body.name if body else None) or "").strip()
    if not name:
        raise InvalidRequestError("Missing folder name")
    return await folders.add(name=name)


@router.delete("/{folder_id}", response_model=DeleteResponse)
async def delete_folder(
    folder_id: str,
    folders: FolderStore = Depends(get_folders_store),
    files: FileStore = Depends(get_files_store),
):
    """Delete a folder and move its files back to root."""
    removed = await remove_folder(folders, files, folder_id)
    if not removed:
        raise NotFoundError("Not found")
    return {"deleted": True, "id": removed.id}
