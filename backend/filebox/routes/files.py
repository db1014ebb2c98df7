"""Files API routes."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File as FastAPIFile, Form, Request, UploadFile
from fastapi.responses import FileResponse

from filebox.config import settings
from filebox.database import get_file_storage, get_files_store, get_folders_store, get_thumbnailer
from filebox.errors import InvalidRequestError, NotFoundError
from filebox.models import FileRecord
from filebox.schemas.common import DeleteResponse
from filebox.schemas.file import FileUpdate
from filebox.services.file_storage import FileStorageService, StoredUpload
from filebox.services.range_stream import DEFAULT_MIME, stat_or_gone, stream_full, stream_range
from filebox.services.folders import move_file as move_file_to_folder
from filebox.services.thumbnails import ThumbnailGenerator
from filebox.services.uploads import register_uploads
from filebox.store import FileStore, FolderStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/files", tags=["files"])


async def _get_or_404(files: FileStore, file_id: str) -> FileRecord:
    record = await files.get(file_id)
    if not record:
        raise NotFoundError("Not found")
    return record


@router.get("", response_model=list[FileRecord])
async def list_files(files: FileStore = Depends(get_files_store)):
    """List all files, newest first."""
    return await files.list()


@router.post("/upload", response_model=list[FileRecord])
async def upload_files(
    files: Optional[list[UploadFile]] = FastAPIFile(None),
    folder_id: Optional[str] = Form(None, alias="folderId"),
    store: FileStore = Depends(get_files_store),
    folders: FolderStore = Depends(get_folders_store),
    storage: FileStorageService = Depends(get_file_storage),
    thumbnailer: ThumbnailGenerator = Depends(get_thumbnailer),
):
    """Upload one or more files (multipart field `files`), optionally into a folder."""
    uploads = [f for f in (files or []) if f.filename]
    if not uploads:
        raise InvalidRequestError("No files uploaded")
    if len(uploads) > settings.MAX_UPLOAD_FILES:
        raise InvalidRequestError(f"At most {settings.MAX_UPLOAD_FILES} files per upload")

    stored: list[StoredUpload] = []
    try:
        for upload in uploads:
            stored.append(await storage.save_upload(upload))
        return await register_uploads(
            stored,
            folder_id,
            files=store,
            folders=folders,
            thumbnailer=thumbnailer,
        )
    except InvalidRequestError:
        # Nothing was registered; drop the bytes written for this batch
        for item in stored:
            await storage.delete(item.path_on_disk)
        raise


@router.patch("/{file_id}", response_model=FileRecord)
async def move_file(
    file_id: str,
    body: Optional[FileUpdate] = None,
    files: FileStore = Depends(get_files_store),
    folders: FolderStore = Depends(get_folders_store),
):
    """Assign a file to a folder, or back to root with a null folderId."""
    record = await _get_or_404(files, file_id)
    folder_id = body.folder_id if body else None

    updated = await move_file_to_folder(files, folders, record.id, folder_id)
    if not updated:
        raise NotFoundError("Not found")
    return updated


@router.get("/{file_id}/thumb")
async def get_thumbnail(file_id: str, files: FileStore = Depends(get_files_store)):
    """Video thumbnail image."""
    record = await _get_or_404(files, file_id)
    if not record.thumb_path:
        raise NotFoundError("No thumbnail")
    await stat_or_gone(record.thumb_path, "Thumbnail")
    return FileResponse(record.thumb_path, media_type="image/jpeg")


@router.get("/{file_id}/raw")
async def get_raw(file_id: str, files: FileStore = Depends(get_files_store)):
    """Full file bytes with the stored MIME type. No range support."""
    record = await _get_or_404(files, file_id)
    return await stream_full(record.path_on_disk, record.mime)


@router.get("/{file_id}/stream")
async def stream_file(
    file_id: str,
    request: Request,
    files: FileStore = Depends(get_files_store),
):
    """Range-aware delivery for video/audio players."""
    record = await _get_or_404(files, file_id)
    return await stream_range(record.path_on_disk, record.mime, request.headers.get("range"))


@router.get("/{file_id}/download")
async def download_file(file_id: str, files: FileStore = Depends(get_files_store)):
    """Download with the original filename as an attachment."""
    record = await _get_or_404(files, file_id)
    await stat_or_gone(record.path_on_disk)
    return FileResponse(
        path=record.path_on_disk,
        filename=record.original_name,
        media_type=record.mime or DEFAULT_MIME,
    )


@router.delete("/{file_id}", response_model=DeleteResponse)
async def delete_file(
    file_id: str,
    files: FileStore = Depends(get_files_store),
    storage: FileStorageService = Depends(get_file_storage),
):
    """Delete a file record, its bytes and its thumbnail."""
    record = await files.remove(file_id)
    if not record:
        raise NotFoundError("Not found")

    # Disk cleanup is best-effort; the record is already gone
    await storage.delete(record.path_on_disk)
    await storage.delete(record.thumb_path)

    return {"deleted": True, "id": record.id}
