"""Upload orchestration: stored bytes -> file records -> video thumbnails.

The destination folder is validated once for the whole batch before any record
is created. Records are then created one by one in submission order, each under
the folder membership lock with the folder re-checked, so a folder deleted
mid-batch sends the remaining files to root. A failed thumbnail leaves
`thumbPath` null and never affects the batch.
"""
import logging
from pathlib import Path
from typing import Optional, Sequence

from filebox.errors import InvalidRequestError, ThumbnailError
from filebox.models import FileRecord
from filebox.services.file_storage import StoredUpload
from filebox.services.folders import validate_folder_ref
from filebox.services.media import is_video
from filebox.services.thumbnails import ThumbnailGenerator
from filebox.store import FileStore, FolderStore

logger = logging.getLogger(__name__)


async def attach_thumbnail(
    files: FileStore,
    thumbnailer: ThumbnailGenerator,
    record: FileRecord,
) -> FileRecord:
    """Generate a thumbnail for a video record. Returns the record unchanged on failure."""
    try:
        thumb_path = await thumbnailer.generate(record.path_on_disk, record.id)
    except ThumbnailError as e:
        logger.warning(f"Thumbnail generation failed for file {record.id}: {e}")
        return record
    except Exception as e:
        logger.warning(f"Thumbnail generation errored for file {record.id}: {e!r}")
        return record

    updated = await files.update(record.id, {"thumb_path": thumb_path})
    return updated or record


async def register_uploads(
    batch: Sequence[StoredUpload],
    folder_id: Optional[str],
    *,
    files: FileStore,
    folders: FolderStore,
    thumbnailer: ThumbnailGenerator,
) -> list[FileRecord]:
    """Create one FileRecord per stored upload, in submission order."""
    if not batch:
        raise InvalidRequestError("No files uploaded")
    folder_id = await validate_folder_ref(folders, folder_id)

    created: list[FileRecord] = []
    for item in batch:
        video = is_video(item.mime, Path(item.original_name).suffix)
        async with folders.membership_lock:
            # The folder may have been deleted while an earlier thumbnail ran
            if folder_id and not await folders.exists(folder_id):
                logger.info(f"Folder {folder_id} was deleted mid-upload; remaining files go to root")
                folder_id = None
            record = await files.add(
                original_name=item.original_name,
                stored_name=item.stored_name,
                size=item.size,
                mime=item.mime,
                path_on_disk=item.path_on_disk,
                is_video=video,
                thumb_path=None,
                folder_id=folder_id,
            )
        if video:
            record = await attach_thumbnail(files, thumbnailer, record)
        created.append(record)

    thumbs = sum(1 for r in created if r.thumb_path)
    logger.info(
        f"Registered {len(created)} upload(s) into folder {folder_id or 'root'} "
        f"({thumbs} thumbnail(s))"
    )
    return created
