"""HTTP tests for the files, folders and stats routes."""
import os
from pathlib import Path

from conftest import upload

VIDEO = ("clip.mp4", b"0123456789" * 10, "video/mp4")
TEXT = ("notes.txt", b"hello world", "text/plain")


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


# ── Upload & list ────────────────────────────────────────────────


def test_upload_and_list(client):
    resp = upload(client, TEXT, VIDEO)

    assert resp.status_code == 200
    created = resp.json()
    assert [f["originalName"] for f in created] == ["notes.txt", "clip.mp4"]
    assert created[0]["size"] == len(TEXT[1])
    assert created[0]["isVideo"] is False
    assert created[1]["isVideo"] is True
    assert created[1]["thumbPath"].endswith(f"{created[1]['id']}.jpg")
    assert Path(created[0]["pathOnDisk"]).read_bytes() == TEXT[1]

    listed = client.get("/api/files").json()
    assert {f["id"] for f in listed} == {f["id"] for f in created}


def test_stored_name_is_sanitized(client):
    created = upload(client, ("my holiday (1).txt", b"x", "text/plain")).json()[0]

    assert created["originalName"] == "my holiday (1).txt"
    assert created["storedName"].endswith("_my_holiday__1_.txt")


def test_upload_without_files(client):
    resp = client.post("/api/files/upload", data={"folderId": ""})
    assert resp.status_code == 400
    assert resp.json() == {"error": "No files uploaded"}


def test_upload_invalid_folder_creates_nothing(client, storage):
    resp = upload(client, TEXT, VIDEO, folder_id="missing-folder")

    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid folderId"}
    assert client.get("/api/files").json() == []
    assert list(storage.base_path.iterdir()) == []


def test_upload_over_size_limit(client, storage):
    storage.max_file_bytes = 5
    resp = upload(client, TEXT)

    assert resp.status_code == 400
    assert client.get("/api/files").json() == []
    assert list(storage.base_path.iterdir()) == []


def test_upload_body_over_batch_limit_rejected_early(client, storage, monkeypatch):
    monkeypatch.setattr("filebox.main.settings.MAX_UPLOAD_FILES", 1)
    monkeypatch.setattr("filebox.main.settings.MAX_UPLOAD_BYTES", 10)

    resp = upload(client, TEXT)

    assert resp.status_code == 400
    assert resp.json() == {"error": "Upload too large"}
    assert client.get("/api/files").json() == []
    assert not storage.base_path.exists() or list(storage.base_path.iterdir()) == []


def test_upload_thumbnail_failure_keeps_file(client, thumbnailer):
    thumbnailer.fail_all = True

    resp = upload(client, VIDEO, TEXT)

    assert resp.status_code == 200
    video, text = resp.json()
    assert video["thumbPath"] is None
    assert text["originalName"] == "notes.txt"
    assert len(client.get("/api/files").json()) == 2


# ── Move between folders ─────────────────────────────────────────


def test_patch_moves_file_between_folders(client):
    folder = client.post("/api/folders", json={"name": "Videos"}).json()
    file_id = upload(client, VIDEO).json()[0]["id"]

    moved = client.patch(f"/api/files/{file_id}", json={"folderId": folder["id"]})
    assert moved.status_code == 200
    assert moved.json()["folderId"] == folder["id"]

    back = client.patch(f"/api/files/{file_id}", json={"folderId": None})
    assert back.json()["folderId"] is None


def test_patch_unknown_file(client):
    resp = client.patch("/api/files/nope", json={"folderId": None})
    assert resp.status_code == 404


def test_patch_invalid_folder(client):
    file_id = upload(client, TEXT).json()[0]["id"]

    resp = client.patch(f"/api/files/{file_id}", json={"folderId": "missing"})

    assert resp.status_code == 400
    assert client.get("/api/files").json()[0]["folderId"] is None


# ── Thumbnails, raw, download ────────────────────────────────────


def test_thumbnail_served(client):
    video = upload(client, VIDEO).json()[0]

    resp = client.get(f"/api/files/{video['id']}/thumb")

    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/jpeg"
    assert resp.content.startswith(b"\xff\xd8")


def test_thumbnail_missing_cases(client):
    text = upload(client, TEXT).json()[0]
    video = upload(client, VIDEO).json()[0]

    assert client.get("/api/files/nope/thumb").status_code == 404
    assert client.get(f"/api/files/{text['id']}/thumb").json() == {"error": "No thumbnail"}

    os.remove(video["thumbPath"])
    assert client.get(f"/api/files/{video['id']}/thumb").status_code == 410


def test_raw_returns_full_bytes(client):
    text = upload(client, TEXT).json()[0]

    resp = client.get(f"/api/files/{text['id']}/raw", headers={"Range": "bytes=0-1"})

    assert resp.status_code == 200
    assert resp.content == TEXT[1]
    assert resp.headers["content-type"].startswith("text/plain")


def test_raw_gone_when_bytes_missing(client):
    text = upload(client, TEXT).json()[0]
    os.remove(text["pathOnDisk"])

    resp = client.get(f"/api/files/{text['id']}/raw")

    assert resp.status_code == 410
    assert resp.json() == {"error": "File missing on disk"}


def test_download_uses_original_name(client):
    text = upload(client, TEXT).json()[0]

    resp = client.get(f"/api/files/{text['id']}/download")

    assert resp.status_code == 200
    assert resp.content == TEXT[1]
    disposition = resp.headers["content-disposition"]
    assert disposition.startswith("attachment")
    assert "notes.txt" in disposition


def test_download_unknown_and_gone(client):
    assert client.get("/api/files/nope/download").status_code == 404

    text = upload(client, TEXT).json()[0]
    os.remove(text["pathOnDisk"])
    assert client.get(f"/api/files/{text['id']}/download").status_code == 410


# ── Range streaming ──────────────────────────────────────────────


def test_stream_without_range(client):
    video = upload(client, VIDEO).json()[0]

    resp = client.get(f"/api/files/{video['id']}/stream")

    assert resp.status_code == 200
    assert resp.content == VIDEO[1]
    assert resp.headers["content-length"] == str(len(VIDEO[1]))
    assert resp.headers["content-type"] == "video/mp4"


def test_stream_single_byte(client):
    video = upload(client, VIDEO).json()[0]
    size = len(VIDEO[1])

    resp = client.get(f"/api/files/{video['id']}/stream", headers={"Range": "bytes=0-0"})

    assert resp.status_code == 206
    assert resp.content == VIDEO[1][:1]
    assert resp.headers["content-range"] == f"bytes 0-0/{size}"
    assert resp.headers["accept-ranges"] == "bytes"
    assert resp.headers["content-length"] == "1"


def test_stream_open_ended_range(client):
    video = upload(client, VIDEO).json()[0]
    size = len(VIDEO[1])

    resp = client.get(f"/api/files/{video['id']}/stream", headers={"Range": "bytes=90-"})

    assert resp.status_code == 206
    assert resp.content == VIDEO[1][90:]
    assert resp.headers["content-range"] == f"bytes 90-{size - 1}/{size}"


def test_stream_range_at_size_is_unsatisfiable(client):
    video = upload(client, VIDEO).json()[0]
    size = len(VIDEO[1])

    resp = client.get(f"/api/files/{video['id']}/stream", headers={"Range": f"bytes={size}-{size}"})

    assert resp.status_code == 416
    assert resp.headers["content-range"] == f"bytes */{size}"
    assert resp.content == b""


def test_stream_malformed_range(client):
    video = upload(client, VIDEO).json()[0]

    resp = client.get(f"/api/files/{video['id']}/stream", headers={"Range": "bytes=abc"})

    assert resp.status_code == 416
    assert "content-range" not in resp.headers


def test_stream_unknown_and_gone(client):
    assert client.get("/api/files/nope/stream").status_code == 404

    video = upload(client, VIDEO).json()[0]
    os.remove(video["pathOnDisk"])
    assert client.get(f"/api/files/{video['id']}/stream").status_code == 410


# ── Delete ───────────────────────────────────────────────────────


def test_delete_removes_record_bytes_and_thumbnail(client):
    video = upload(client, VIDEO).json()[0]

    resp = client.delete(f"/api/files/{video['id']}")

    assert resp.status_code == 200
    assert resp.json() == {"deleted": True, "id": video["id"]}
    assert not Path(video["pathOnDisk"]).exists()
    assert not Path(video["thumbPath"]).exists()
    assert client.get("/api/files").json() == []
    assert client.delete(f"/api/files/{video['id']}").status_code == 404


def test_delete_tolerates_missing_bytes(client):
    text = upload(client, TEXT).json()[0]
    os.remove(text["pathOnDisk"])

    assert client.delete(f"/api/files/{text['id']}").status_code == 200
    assert client.get("/api/files").json() == []


# ── Folders ──────────────────────────────────────────────────────


def test_create_and_list_folders(client):
    client.post("/api/folders", json={"name": "  Music  "})
    client.post("/api/folders", json={"name": "Documents"})

    names = [f["name"] for f in client.get("/api/folders").json()]
    assert names == ["Documents", "Music"]


def test_create_folder_requires_name(client):
    assert client.post("/api/folders", json={"name": "   "}).status_code == 400
    assert client.post("/api/folders", json={}).status_code == 400
    assert client.post("/api/folders").status_code == 400
    assert client.get("/api/folders").json() == []


def test_delete_folder_unfiles_its_files(client):
    folder = client.post("/api/folders", json={"name": "Trip"}).json()
    other = client.post("/api/folders", json={"name": "Work"}).json()
    in_trip = upload(client, VIDEO, TEXT, folder_id=folder["id"]).json()
    in_work = upload(client, TEXT, folder_id=other["id"]).json()

    resp = client.delete(f"/api/folders/{folder['id']}")

    assert resp.status_code == 200
    files = {f["id"]: f for f in client.get("/api/files").json()}
    assert all(files[f["id"]]["folderId"] is None for f in in_trip)
    assert files[in_work[0]["id"]]["folderId"] == other["id"]
    assert [f["id"] for f in client.get("/api/folders").json()] == [other["id"]]


def test_delete_unknown_folder(client):
    assert client.delete("/api/folders/nope").status_code == 404


# ── Stats ────────────────────────────────────────────────────────


def test_stats(client):
    upload(client, TEXT, VIDEO)

    stats = client.get("/api/stats").json()

    assert stats["fileCount"] == 2
    assert stats["totalBytes"] == len(TEXT[1]) + len(VIDEO[1])
    assert stats["diskTotalBytes"] is None or stats["diskTotalBytes"] >= stats["diskFreeBytes"]


def test_stats_disk_figures_absent_when_unavailable(client, monkeypatch):
    async def _unavailable(path):
        return None, None

    monkeypatch.setattr("filebox.services.stats.disk_usage", _unavailable)

    stats = client.get("/api/stats").json()
    assert stats == {"fileCount": 0, "totalBytes": 0, "diskFreeBytes": None, "diskTotalBytes": None}
