"""Shared fixtures: isolated stores under tmp_path and an app client wired to them."""
import os
import tempfile
from pathlib import Path

# Point module-level singletons at a scratch area before filebox is imported
_SCRATCH = Path(tempfile.mkdtemp(prefix="filebox-tests-"))
os.environ.setdefault("DATA_DIR", str(_SCRATCH / "data"))
os.environ.setdefault("UPLOAD_DIR", str(_SCRATCH / "uploads"))
os.environ.setdefault("THUMBS_DIR", str(_SCRATCH / "thumbs"))

import pytest
from fastapi.testclient import TestClient

from filebox.database import get_file_storage, get_files_store, get_folders_store, get_thumbnailer
from filebox.errors import ThumbnailError
from filebox.main import app
from filebox.services.file_storage import FileStorageService
from filebox.services.thumbnails import ThumbnailGenerator
from filebox.store import FileStore, FolderStore


class FakeThumbnailer(ThumbnailGenerator):
    """Writes a tiny JPEG stand-in, or fails for sources named in `fail_for`."""

    def __init__(self, thumbs_dir, fail_for=(), fail_all=False):
        super().__init__(thumbs_dir)
        self.fail_for = set(fail_for)
        self.fail_all = fail_all
        self.calls: list[tuple[str, str]] = []

    async def generate(self, source_path: str, record_id: str) -> str:
        self.calls.append((source_path, record_id))
        if self.fail_all or any(name in source_path for name in self.fail_for):
            raise ThumbnailError("ffmpeg exit 1")
        self.thumbs_dir.mkdir(parents=True, exist_ok=True)
        out = self.thumb_path_for(record_id)
        out.write_bytes(b"\xff\xd8\xff\xe0fake-jpeg")
        return str(out)


@pytest.fixture
def files_store(tmp_path) -> FileStore:
    return FileStore(tmp_path / "data" / "files.json")


@pytest.fixture
def folders_store(tmp_path) -> FolderStore:
    return FolderStore(tmp_path / "data" / "folders.json")


@pytest.fixture
def storage(tmp_path) -> FileStorageService:
    return FileStorageService(tmp_path / "uploads", max_file_bytes=1024 * 1024)


@pytest.fixture
def thumbnailer(tmp_path) -> FakeThumbnailer:
    return FakeThumbnailer(tmp_path / "thumbs")


@pytest.fixture
def client(files_store, folders_store, storage, thumbnailer):
    app.dependency_overrides[get_files_store] = lambda: files_store
    app.dependency_overrides[get_folders_store] = lambda: folders_store
    app.dependency_overrides[get_file_storage] = lambda: storage
    app.dependency_overrides[get_thumbnailer] = lambda: thumbnailer
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def upload(client, *files, folder_id=None):
    """POST a batch of (name, content, mime) tuples to /api/files/upload."""
    data = {"folderId": folder_id} if folder_id is not None else {}
    return client.post(
        "/api/files/upload",
        files=[("files", f) for f in files],
        data=data,
    )
