import asyncio
import json
from io import BytesIO

import pytest
from fastapi import UploadFile
from fastapi.testclient import TestClient

from drivesync.api.exceptions import InvalidUploadContext
from drivesync.core import config
from drivesync.main import app
from drivesync.routers import dependencies, documents

from conftest import seed

SESSION = {"mu-session-id": "session-1"}


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "DATABASE_TYPE", "memory")
    monkeypatch.setattr(config, "STORAGE_TYPE", "local")
    monkeypatch.setattr(config, "LOCAL_STORAGE_DIR", str(tmp_path / "drive"))
    monkeypatch.setattr(config, "FILE_DROP_ENABLED", True)
    monkeypatch.setattr(config, "FILE_DROP_DIRECTORY", tmp_path / "upload")
    monkeypatch.setattr(config, "FAILED_DROP_DIRECTORY", tmp_path / "upload" / "failed")
    monkeypatch.setattr(config, "FILE_DROP_SYNC_INTERVAL_MS", 60000)

    with TestClient(app) as test_client:
        asyncio.run(seed(dependencies.db_service))
        yield test_client


def upload_attachment(client, case_id="case-1", name="notes.txt", content=b"hello"):
    return client.post(
        f"/cases/{case_id}/attachments",
        files={"file": (name, content, "text/plain")},
        headers=SESSION
    )


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["file_drop"] == "running"


def test_404_handler(client):
    response = client.get("/non-existent-route")
    assert response.status_code == 404


def test_cors_headers(client):
    response = client.options(
        "/health",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "GET"}
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"


def test_upload_case_attachment(client, tmp_path):
    response = upload_attachment(client)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["type"] == "files"
    assert data["attributes"]["name"] == "notes.txt"
    assert data["attributes"]["extension"] == "txt"
    assert data["attributes"]["size"] == 5
    assert (tmp_path / "drive/crm-development/attachments/DOS-2024-001/notes.txt").read_bytes() == b"hello"


def test_upload_requires_session_header(client):
    response = client.post("/cases/case-1/attachments", files={"file": ("a.txt", b"a", "text/plain")})
    assert response.status_code == 400


def test_upload_with_expired_session(client):
    response = client.post(
        "/cases/case-1/attachments",
        files={"file": ("a.txt", b"a", "text/plain")},
        headers={"mu-session-id": "session-expired"}
    )
    assert response.status_code == 401


def test_upload_for_unknown_case(client):
    response = upload_attachment(client, case_id="unknown")
    assert response.status_code == 404


def test_upload_document(client, tmp_path):
    response = client.post(
        "/documents",
        files={"file": ("generated.pdf", b"%PDF", "application/pdf")},
        data={"type": "invoice", "context": json.dumps({"invoice_id": "invoice-1"})},
        headers=SESSION
    )

    assert response.status_code == 201
    attributes = response.json()["data"]["attributes"]
    assert attributes["name"] == "F0000042.pdf"
    assert attributes["document_type"] == "invoice"
    assert (tmp_path / "drive/crm-development/facturen/2024/F0000042.pdf").exists()


@pytest.mark.parametrize("data", [
    {"type": "brochure"},
    {"type": "invoice"},
    {"type": "invoice", "context": "{not json"},
    {"type": "invoice", "context": "[1, 2]"},
])
def test_upload_document_rejects_bad_input(client, data):
    response = client.post(
        "/documents",
        files={"file": ("generated.pdf", b"%PDF", "application/pdf")},
        data=data,
        headers=SESSION
    )
    assert response.status_code == 400


def test_download_redirects_to_location(client):
    file_id = upload_attachment(client).json()["data"]["id"]

    response = client.get(f"/files/{file_id}/download", headers=SESSION)

    assert response.status_code == 204
    assert response.headers["location"].startswith("file://")
    assert response.headers["location"].endswith("notes.txt")


def test_delete_file(client, tmp_path):
    file_id = upload_attachment(client).json()["data"]["id"]

    response = client.delete(f"/files/{file_id}", headers=SESSION)
    assert response.status_code == 204
    assert not (tmp_path / "drive/crm-development/attachments/DOS-2024-001/notes.txt").exists()

    assert client.delete(f"/files/{file_id}", headers=SESSION).status_code == 404
    assert client.get(f"/files/{file_id}/download", headers=SESSION).status_code == 404


def test_delete_removes_metadata_when_remote_file_is_gone(client, tmp_path):
    file_id = upload_attachment(client).json()["data"]["id"]
    (tmp_path / "drive/crm-development/attachments/DOS-2024-001/notes.txt").unlink()

    assert client.get(f"/files/{file_id}/download", headers=SESSION).status_code == 404
    assert client.delete(f"/files/{file_id}", headers=SESSION).status_code == 204
    assert client.delete(f"/files/{file_id}", headers=SESSION).status_code == 404


def test_drop_queue_status(client):
    response = client.get("/drop-queue")
    assert response.status_code == 200
    assert response.json() == {
        "enabled": True,
        "current": None,
        "queue": [],
        "is_handling": False,
        "uploaded": 0,
        "failed": 0
    }


def test_me(client):
    assert client.get("/me", headers=SESSION).status_code == 204


def test_me_requires_session_header(client):
    assert client.get("/me").status_code == 400


def test_me_with_expired_session(client):
    assert client.get("/me", headers={"mu-session-id": "session-expired"}).status_code == 401


@pytest.mark.parametrize("filename", [None, ""])
def test_upload_without_file_name_is_rejected(client, tmp_path, filename):
    remote = dependencies.storage_factory.for_session()

    with pytest.raises(InvalidUploadContext):
        asyncio.run(documents.upload_case_attachment(
            "case-1", UploadFile(file=BytesIO(b"hello"), filename=filename), remote_client=remote
        ))
    with pytest.raises(InvalidUploadContext):
        asyncio.run(documents.upload_document(
            UploadFile(file=BytesIO(b"%PDF"), filename=filename),
            type="invoice",
            context=json.dumps({"invoice_id": "invoice-1"}),
            remote_client=remote
        ))
    assert not (tmp_path / "drive/crm-development").exists()
