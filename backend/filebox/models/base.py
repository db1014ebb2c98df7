"""Shared fields for persisted records."""
import uuid
from datetime import datetime, timezone

from pydantic import Field

from filebox.schemas.base import CamelRecordModel


def new_record_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecordBase(CamelRecordModel):
    """Adds the immutable id and createdAt every collection entry carries."""
    id: str = Field(default_factory=new_record_id)
    created_at: datetime = Field(default_factory=utcnow)
