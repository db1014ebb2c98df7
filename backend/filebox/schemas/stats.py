"""Usage statistics schema."""
from typing import Optional

from filebox.schemas.base import CamelModel


class StatsResponse(CamelModel):
    file_count: int
    total_bytes: int
    # None when the platform cannot report filesystem usage
    disk_free_bytes: Optional[int] = None
    disk_total_bytes: Optional[int] = None
