"""Typed record stores over JSON collections.

`RecordStore` provides list/get/add/update/remove for one record type. The
files and folders variants add ordering and the few helpers the routes need.
Stores never touch file bytes on disk; callers own that.
"""
import asyncio
import logging
from pathlib import Path
from typing import Any, Generic, Optional, TypeVar

from pydantic import ValidationError

from filebox.models import FileRecord, FolderRecord, RecordBase
from filebox.store.json_collection import JsonCollection

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=RecordBase)

_IMMUTABLE_FIELDS = {"id", "created_at"}


def _find(items: list[dict], record_id: str) -> int:
    for idx, item in enumerate(items):
        if item.get("id") == record_id:
            return idx
    return -1


class RecordStore(Generic[T]):
    """Persisted collection of one record type."""

    model: type[T]

    def __init__(self, path: Path | str):
        self.collection = JsonCollection(path)

    async def init(self) -> None:
        await self.collection.ensure()

    def _sorted(self, records: list[T]) -> list[T]:
        return records

    def _load(self, item: dict) -> Optional[T]:
        """Validate one stored entry. Entries that do not fit the model are
        skipped and left untouched on disk."""
        try:
            return self.model.model_validate(item)
        except ValidationError as e:
            logger.warning(
                f"Skipping unreadable {self.model.__name__} {item.get('id')!r} "
                f"in {self.collection.path}: {e.error_count()} validation error(s)"
            )
            return None

    async def list(self) -> list[T]:
        items = await self.collection.read()
        records = [self._load(item) for item in items]
        return self._sorted([r for r in records if r is not None])

    async def get(self, record_id: str) -> Optional[T]:
        items = await self.collection.read()
        idx = _find(items, record_id)
        return self._load(items[idx]) if idx != -1 else None

    async def add(self, **fields: Any) -> T:
        """Assign a fresh id and createdAt, append and persist."""
        fields = {k: v for k, v in fields.items() if k not in _IMMUTABLE_FIELDS}
        record = self.model(**fields)

        def _append(items: list[dict]):
            items.append(record.to_json_dict())
            return True, record

        return await self.collection.mutate(_append)

    async def update(self, record_id: str, patch: dict) -> Optional[T]:
        """Shallow-merge snake_case `patch` into a record. None if unknown id."""
        patch = {k: v for k, v in patch.items() if k not in _IMMUTABLE_FIELDS}

        def _merge(items: list[dict]):
            idx = _find(items, record_id)
            if idx == -1:
                return False, None
            current = self._load(items[idx])
            if current is None:
                return False, None
            merged = current.model_copy(update=patch)
            items[idx] = merged.to_json_dict()
            return True, merged

        return await self.collection.mutate(_merge)

    async def remove(self, record_id: str) -> Optional[T]:
        """Delete a record and return it. None if unknown id."""

        def _pop(items: list[dict]):
            idx = _find(items, record_id)
            current = self._load(items[idx]) if idx != -1 else None
            if current is None:
                return False, None
            items.pop(idx)
            return True, current

        return await self.collection.mutate(_pop)


class FileStore(RecordStore[FileRecord]):
    """File records, newest first."""

    model = FileRecord

    def _sorted(self, records: list[FileRecord]) -> list[FileRecord]:
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    async def unfile(self, folder_id: str) -> int:
        """Move every file in `folder_id` back to root in one write."""

        def _clear(items: list[dict]):
            count = 0
            for item in items:
                if item.get("folderId") == folder_id:
                    item["folderId"] = None
                    count += 1
            return count > 0, count

        return await self.collection.mutate(_clear)


class FolderStore(RecordStore[FolderRecord]):
    """Folder records, by name.

    Callers that check a folder id and then write it into a file record, or
    remove a folder and then unfile its files, hold `membership_lock` across
    both steps.
    """

    model = FolderRecord

    def __init__(self, path: Path | str):
        super().__init__(path)
        self.membership_lock = asyncio.Lock()

    def _sorted(self, records: list[FolderRecord]) -> list[FolderRecord]:
        return sorted(records, key=lambda r: (r.name.casefold(), r.name))

    async def exists(self, folder_id: str) -> bool:
        return await self.get(folder_id) is not None
