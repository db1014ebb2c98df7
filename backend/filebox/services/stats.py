"""Usage statistics: record sizes plus filesystem capacity."""
import asyncio
import logging
from typing import Optional

import psutil

from filebox.schemas.stats import StatsResponse
from filebox.store import FileStore

logger = logging.getLogger(__name__)


async def disk_usage(path: str) -> tuple[Optional[int], Optional[int]]:
    """(free, total) bytes for the volume holding `path`; (None, None) if unavailable."""
    try:
        usage = await asyncio.to_thread(psutil.disk_usage, path)
    except (OSError, NotImplementedError) as e:
        logger.debug(f"Disk usage unavailable for {path}: {e}")
        return None, None
    return usage.free, usage.total


async def collect_stats(files: FileStore, storage_path: str) -> StatsResponse:
    records = await files.list()
    total_bytes = sum(r.size or 0 for r in records)
    free, total = await disk_usage(storage_path)
    return StatsResponse(
        file_count=len(records),
        total_bytes=total_bytes,
        disk_free_bytes=free,
        disk_total_bytes=total,
    )
