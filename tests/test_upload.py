"""Tests for the upload endpoint."""

import io
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image

from filedrop.api.dependencies import get_orchestrator
from filedrop.core.config import Settings
from filedrop.main import app
from filedrop.services.uploader.exceptions import StoreError
from filedrop.storage.base import ObjectStore, StoreConfig
from filedrop.storage.memory import InMemoryObjectStore

MB = 1024 * 1024


def test_upload_valid_file(client, override_dependencies, memory_store):
    """Test uploading a valid file."""
    override_dependencies(memory_store)
    file_content = b"plain text body"
    files = {"file": ("notes.txt", io.BytesIO(file_content), "text/plain")}

    response = client.post("/upload", files=files)

    assert response.status_code == 200
    results = response.json()["results"]
    assert len(results) == 1
    assert results[0]["success"] is True
    info = results[0]["fileInfo"]
    assert info["originalName"] == "notes.txt"
    assert info["filename"].endswith("_notes.txt")
    assert info["size"] == len(file_content)
    assert info["type"] == "text/plain"
    assert info["uploadedAt"].endswith("Z")
    assert info["url"] == f"https://files.example.com/{info['filename']}"
    assert info["uploadMetadata"]["etag"]
    assert info["uploadMetadata"]["versionId"] is None
    assert memory_store.get_object(info["filename"])[0] == file_content


def test_upload_multiple_files_keeps_order(client, override_dependencies, memory_store):
    """A disallowed file in the middle is rejected on its own."""
    override_dependencies(memory_store)
    files = [
        ("file", ("one.txt", io.BytesIO(b"1"), "text/plain")),
        ("file", ("two.exe", io.BytesIO(b"MZ"), "application/x-msdownload")),
        ("file", ("three.pdf", io.BytesIO(b"%PDF-1.4"), "application/pdf")),
    ]

    response = client.post("/upload", files=files)

    assert response.status_code == 200
    results = response.json()["results"]
    assert results[0]["fileInfo"]["originalName"] == "one.txt"
    assert results[1] == {"error": "File 'two.exe' type not allowed"}
    assert results[2]["fileInfo"]["originalName"] == "three.pdf"


def test_upload_compressed_png_with_custom_domain(
    client, override_dependencies, memory_store, large_png_bytes
):
    """A 2 MB PNG is compressed, stored and given a public URL."""
    override_dependencies(memory_store)
    assert len(large_png_bytes) > 2_000_000
    files = {"file": ("big picture.png", io.BytesIO(large_png_bytes), "image/png")}

    response = client.post("/upload?compress=true", files=files)

    assert response.status_code == 200
    info = response.json()["results"][0]["fileInfo"]
    assert info["type"] == "image/png"
    assert info["url"].startswith("https://files.example.com/")
    stored, content_type = memory_store.get_object(info["filename"])
    assert content_type == "image/png"
    assert info["size"] == len(stored) > 0
    assert Image.open(io.BytesIO(stored)).format == "PNG"


def test_upload_oversized_file(client, override_dependencies, memory_store):
    """Test upload with file exceeding the 5 MB limit."""
    override_dependencies(memory_store)
    file_content = b"\xff" * (6 * MB)
    files = {"file": ("huge.jpg", io.BytesIO(file_content), "image/jpeg")}

    response = client.post("/upload", files=files)

    assert response.status_code == 200
    result = response.json()["results"][0]
    assert "success" not in result
    assert "5MB" in result["error"]
    assert memory_store.list_objects().key_count == 0


def test_upload_limit_follows_settings(client, override_dependencies, memory_store):
    override_dependencies(memory_store, Settings(STORAGE_BACKEND="memory", MAX_UPLOAD_MB=1))
    files = {"file": ("two-megs.txt", io.BytesIO(b"x" * (2 * MB)), "text/plain")}

    response = client.post("/upload", files=files)

    assert "1MB" in response.json()["results"][0]["error"]


def test_upload_without_configured_store(client, override_dependencies, unconfigured_store):
    """Without a store, valid files are reported but not stored."""
    override_dependencies(unconfigured_store)
    files = {"file": ("readme.txt", io.BytesIO(b"read me"), "text/plain")}

    response = client.post("/upload", files=files)

    assert response.status_code == 200
    info = response.json()["results"][0]["fileInfo"]
    assert info["url"] is None
    assert info["uploadMetadata"] is None


def test_upload_without_configured_store_reject_mode(client, override_dependencies, unconfigured_store):
    override_dependencies(
        unconfigured_store,
        Settings(STORAGE_BACKEND="r2", UNCONFIGURED_STORE_MODE="reject"),
    )
    files = {"file": ("readme.txt", io.BytesIO(b"read me"), "text/plain")}

    response = client.post("/upload", files=files)

    assert response.json()["results"] == [{"error": "Object store is not configured"}]


def test_upload_no_files(client, override_dependencies, memory_store):
    """A request without file fields is rejected as a whole."""
    override_dependencies(memory_store)

    response = client.post("/upload", data={"comment": "no files here"})

    assert response.status_code == 400
    assert response.json() == {"error": "No files provided"}


def test_upload_file_field_without_file(client, override_dependencies, memory_store):
    override_dependencies(memory_store)

    response = client.post(
        "/upload",
        data={"file": "just a string"},
        files={"other": ("a.txt", io.BytesIO(b"a"), "text/plain")},
    )

    assert response.status_code == 400
    assert "results" not in response.json()


def test_upload_malformed_body(client, override_dependencies, memory_store):
    override_dependencies(memory_store)

    response = client.post(
        "/upload",
        content=b"this is not multipart",
        headers={"Content-Type": "multipart/form-data; boundary=abc"},
    )

    assert response.status_code == 400
    assert "error" in response.json()


def test_upload_store_failure_reported_per_file(client, override_dependencies, store_config):
    store = MagicMock(spec=ObjectStore)
    store.config = store_config
    store.is_configured.return_value = True
    store.put_object.side_effect = StoreError("denied")
    override_dependencies(store)
    files = {"file": ("a.txt", io.BytesIO(b"a"), "text/plain")}

    response = client.post("/upload", files=files)

    assert response.status_code == 200
    assert response.json()["results"] == [{"error": "Failed to upload 'a.txt' to object store"}]


def test_upload_internal_error(client):
    """Test unexpected failures return a generic 500."""
    orchestrator = MagicMock()
    orchestrator.process_batch = AsyncMock(side_effect=RuntimeError("secret detail"))
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    try:
        files = {"file": ("a.txt", io.BytesIO(b"a"), "text/plain")}
        response = client.post("/upload", files=files)
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    assert "secret" not in response.text


def test_upload_compress_flag_passed(client):
    orchestrator = MagicMock()
    orchestrator.process_batch = AsyncMock(return_value=MagicMock(outcomes=()))
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    try:
        files = {"file": ("a.txt", io.BytesIO(b"a"), "text/plain")}
        client.post("/upload?compress=true", files=files)
    finally:
        app.dependency_overrides.clear()

    args, kwargs = orchestrator.process_batch.call_args
    assert kwargs["compress"] is True
    assert args[0][0].filename == "a.txt"
    assert args[0][0].data == b"a"


@pytest.mark.parametrize("value", ["", "no_thanks", "TRUE", "1"])
def test_upload_compress_only_exact_true(client, value):
    orchestrator = MagicMock()
    orchestrator.process_batch = AsyncMock(return_value=MagicMock(outcomes=()))
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    try:
        files = {"file": ("a.txt", io.BytesIO(b"a"), "text/plain")}
        response = client.post(f"/upload?compress={value}", files=files)
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert orchestrator.process_batch.call_args.kwargs["compress"] is False


def test_upload_with_info_logging(client, override_dependencies, memory_store, caplog):
    override_dependencies(memory_store)
    files = [
        ("file", ("ok.txt", io.BytesIO(b"fine"), "text/plain")),
        ("file", ("bad.exe", io.BytesIO(b"MZ"), "application/x-msdownload")),
    ]

    with caplog.at_level(logging.INFO):
        response = client.post("/upload", files=files)

    assert response.status_code == 200
    results = response.json()["results"]
    assert results[0]["success"] is True
    assert results[1] == {"error": "File 'bad.exe' type not allowed"}


def test_upload_preflight(client):
    response = client.options("/upload")

    assert response.status_code == 200
    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert response.headers["Access-Control-Allow-Methods"] == "POST, OPTIONS"
    assert response.headers["Access-Control-Allow-Headers"] == "Content-Type"


def test_upload_browser_preflight(client):
    response = client.options(
        "/upload",
        headers={
            "Origin": "https://app.example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    assert "POST" in response.headers["access-control-allow-methods"]


def test_request_id_header(client, override_dependencies, memory_store):
    override_dependencies(memory_store)

    response = client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"


@pytest.mark.parametrize("name", ["../../etc/passwd", "weird name (1).txt", "report #1 [final].txt"])
def test_upload_filename_is_sanitized(client, override_dependencies, name):
    store = InMemoryObjectStore(StoreConfig())
    override_dependencies(store)
    files = {"file": (name, io.BytesIO(b"x"), "text/plain")}

    response = client.post("/upload", files=files)

    info = response.json()["results"][0]["fileInfo"]
    key = info["filename"]
    timestamp, _, rest = key.partition("_")
    assert timestamp.isdigit()
    assert all(c.isascii() and (c.isalnum() or c in "._-") for c in rest)
    assert info["originalName"] == name
