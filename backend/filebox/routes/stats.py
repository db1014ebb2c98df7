"""Stats API route."""
from fastapi import APIRouter, Depends

from filebox.config import settings
from filebox.database import get_files_store
from filebox.schemas.stats import StatsResponse
from filebox.services.stats import collect_stats
from filebox.store import FileStore

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("", response_model=StatsResponse)
async def get_stats(files: FileStore = Depends(get_files_store)):
    """File count, bytes stored and free/total space of the upload volume."""
    return await collect_stats(files, settings.UPLOAD_DIR)
