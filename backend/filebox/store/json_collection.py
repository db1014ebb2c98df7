"""Whole-file JSON collection with atomic rewrite.

One canonical file holds the full record list. Every mutation reads the whole
list, changes it in memory and writes it back through a temporary sibling that
is fsynced and then renamed over the canonical file, so a crash never leaves a
truncated collection behind.

Every write, including the repair of a missing or corrupt file, happens under
the per-collection asyncio.Lock. A healthy read takes no lock: the rename means
a reader always sees one complete snapshot.
"""
import asyncio
import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, TypeVar

import aiofiles
import aiofiles.os

from filebox.errors import StorageCorruptionError

logger = logging.getLogger(__name__)

R = TypeVar("R")

# Mutator contract: (items) -> (changed, result). Items are mutated in place.
Mutator = Callable[[list[dict]], tuple[bool, R]]


class JsonCollection:
    """A list of JSON objects persisted in a single file."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._tmp_path = self.path.with_name(self.path.name + ".tmp")
        self._lock = asyncio.Lock()

    async def ensure(self) -> None:
        """Create the parent directory and an empty collection if missing."""
        async with self._lock:
            await self._create_if_missing()

    async def read(self) -> list[dict]:
        """Return every stored object. Missing or corrupt content is reset to empty."""
        try:
            return _parse(await self._load_raw())
        except (FileNotFoundError, StorageCorruptionError):
            pass
        # Re-read under the lock; another task may already have repaired it
        async with self._lock:
            return await self._read_and_repair()

    async def mutate(self, fn: Mutator) -> Any:
        """Run one read-modify-write cycle under the collection lock.

        The file is rewritten only when `fn` reports a change.
        """
        async with self._lock:
            items = await self._read_and_repair()
            changed, result = fn(items)
            if changed:
                await self._write(items)
            return result

    async def _load_raw(self) -> str:
        async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
            return await f.read()

    async def _create_if_missing(self) -> None:
        await aiofiles.os.makedirs(self.path.parent, exist_ok=True)
        if not await aiofiles.os.path.exists(self.path):
            await self._write([])

    async def _read_and_repair(self) -> list[dict]:
        # Caller holds self._lock
        try:
            raw = await self._load_raw()
        except FileNotFoundError:
            await self._create_if_missing()
            return []
        try:
            return _parse(raw)
        except StorageCorruptionError as e:
            await self._reset_corrupt(raw, e)
            return []

    async def _write(self, items: list[dict]) -> None:
        payload = json.dumps(items, indent=2, ensure_ascii=False)
        async with aiofiles.open(self._tmp_path, "w", encoding="utf-8") as f:
            await f.write(payload)
            await f.flush()
            await asyncio.to_thread(os.fsync, f.fileno())
        await aiofiles.os.replace(self._tmp_path, self.path)

    async def _reset_corrupt(self, raw: str, error: StorageCorruptionError) -> None:
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        backup = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")
        async with aiofiles.open(backup, "w", encoding="utf-8") as f:
            await f.write(raw)
        logger.warning(
            f"Collection {self.path} is corrupt ({error}); "
            f"reset to empty, previous content saved to {backup}"
        )
        await self._write([])


def _parse(raw: str) -> list[dict]:
    """Decode collection content. Blank content is an empty collection."""
    raw = raw.strip()
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise StorageCorruptionError(f"invalid JSON: {e}") from e
    if not isinstance(parsed, list):
        raise StorageCorruptionError(f"expected a JSON array, got {type(parsed).__name__}")
    return [item for item in parsed if isinstance(item, dict)]
